from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple
import cv2
import numpy as np

# world axis shown horizontally / vertically on the image for each view
_PLANES = {
    "side": (0, 1),   # x right, y up
    "front": (2, 1),  # z right, y up
    "top": (0, 2),    # x right, z down the image
}


@dataclass
class ViewTransform:
    """Orthographic projection of world points onto image pixels."""
    width: int = 1280
    height: int = 720
    scale: float = 40.0                               # pixels per world unit
    origin: Tuple[float, float] = (100.0, 620.0)      # pixel of the world origin
    plane: str = "side"

    def __post_init__(self):
        if self.plane not in _PLANES:
            raise ValueError(f"Unknown view plane {self.plane!r}, expected one of {sorted(_PLANES)}")


def project_points(points: np.ndarray, view: ViewTransform) -> np.ndarray:
    """Project (N, 3) world points to (N, 2) pixel coordinates (image y down)."""
    pts = np.asarray(points, dtype=float).reshape(-1, 3)
    u_axis, v_axis = _PLANES[view.plane]
    u = view.origin[0] + pts[:, u_axis] * view.scale
    if view.plane == "top":
        v = view.origin[1] + pts[:, v_axis] * view.scale
    else:
        v = view.origin[1] - pts[:, v_axis] * view.scale
    return np.column_stack((u, v))


def draw_tracer(
    frame: np.ndarray,
    points: np.ndarray,
    color: Tuple[int, int, int] = (0, 0, 255),  # Red
    thickness: int = 2,
    mark_ends: bool = True,
) -> np.ndarray:
    """Draw a polyline through pixel points onto the frame.

    Args:
        frame: Image to draw on (BGR), modified in place
        points: Nx2 array of pixel coordinates
        color: BGR color tuple
        thickness: Line thickness
        mark_ends: Draw filled circles at the launch and landing points

    Returns:
        Frame with the polyline drawn
    """
    if points is None or len(points) < 2:
        return frame  # Not enough points to draw

    pts = np.round(np.asarray(points)).astype(np.int32).reshape((-1, 1, 2))
    cv2.polylines(frame, [pts], isClosed=False, color=color, thickness=thickness, lineType=cv2.LINE_AA)

    if mark_ends:
        for p in (pts[0][0], pts[-1][0]):
            cv2.circle(frame, (int(p[0]), int(p[1])), radius=thickness * 2, color=color,
                       thickness=-1, lineType=cv2.LINE_AA)
    return frame


class PolylineSink(Protocol):
    """Anything that can display an ordered, fixed-length sequence of 3D points as a line."""

    def set_position_count(self, count: int) -> None: ...

    def set_positions(self, points: Sequence) -> None: ...

    def clear(self) -> None: ...


class PolylineRenderer:
    """Polyline sink that draws the last received points with cv2.

    Accepts exactly position_count points per update, mirroring a line
    renderer whose vertex count is fixed at start-up.
    """

    def __init__(
        self,
        view: Optional[ViewTransform] = None,
        color: Tuple[int, int, int] = (0, 0, 255),
        thickness: int = 2,
        background: Tuple[int, int, int] = (30, 30, 30),
    ):
        self.view = view or ViewTransform()
        self.color = tuple(color)
        self.thickness = thickness
        self.background = tuple(background)
        self.position_count = 0
        self.positions: Optional[np.ndarray] = None

    def set_position_count(self, count: int) -> None:
        self.position_count = int(count)
        self.positions = None

    def set_positions(self, points: Sequence) -> None:
        pts = np.array(points, dtype=float).reshape(-1, 3)
        if len(pts) != self.position_count:
            raise ValueError(f"Expected {self.position_count} positions, got {len(pts)}")
        self.positions = pts

    def clear(self) -> None:
        self.positions = None

    def blank_frame(self) -> np.ndarray:
        frame = np.zeros((self.view.height, self.view.width, 3), dtype=np.uint8)
        frame[:] = self.background
        return frame

    def render(self, frame: Optional[np.ndarray] = None) -> np.ndarray:
        if frame is None:
            frame = self.blank_frame()
        if self.positions is None:
            return frame
        return draw_tracer(frame, project_points(self.positions, self.view), color=self.color,
                           thickness=self.thickness)

    def pixel_positions(self) -> List[Tuple[float, float]]:
        if self.positions is None:
            return []
        return [tuple(p) for p in project_points(self.positions, self.view).tolist()]
