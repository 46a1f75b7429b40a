from typing import Iterable, Optional, Tuple
from pathlib import Path
import logging
import os
import shutil
import subprocess
import cv2

from src.physics.model import Point3, TrajectoryResult
from .overlay import PolylineRenderer, ViewTransform, draw_tracer, project_points

logger = logging.getLogger(__name__)


def write_trajectory_image(
    result: TrajectoryResult,
    output_path: str,
    view: Optional[ViewTransform] = None,
    color: Tuple[int, int, int] = (0, 0, 255),
    thickness: int = 2,
) -> str:
    """Render a single solved arc to an image file."""
    renderer = PolylineRenderer(view=view, color=color, thickness=thickness)
    frame = renderer.blank_frame()
    frame = draw_tracer(frame, project_points(result.points, renderer.view), color=color, thickness=thickness)
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output_path), frame):
        raise RuntimeError(f"Could not write image: {output_path}")
    return str(output_path)


def write_trajectory_video(
    frames: Iterable[Tuple[Point3, Point3]],
    output_path: str,
    tracer,
    renderer: PolylineRenderer,
    fps: float = 30.0,
    codec: str = "mp4v",
    ffmpeg_path: Optional[str] = None,
) -> int:
    """Drive the tracer once per frame and write what the renderer draws.

    Args:
        frames: (start, finish) pair for each frame
        output_path: Path to save output video
        tracer: TrajectoryTracer whose endpoints accept set_*_point
        renderer: The tracer's polyline sink
        fps: Frames per second
        codec: Video codec to use (default: mp4v)
        ffmpeg_path: If given, remux with ffmpeg to H.264 for wider playback support

    Returns:
        Number of frames where a trajectory was drawn
    """
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    fourcc = cv2.VideoWriter_fourcc(*codec)
    out = cv2.VideoWriter(str(output_path), fourcc, fps, (renderer.view.width, renderer.view.height))
    if not out.isOpened():
        raise RuntimeError(f"Could not open video writer: {output_path}")

    drawn = 0
    try:
        for start, finish in frames:
            tracer.set_start_point(start)
            tracer.set_finish_point(finish)
            if tracer.update() is not None:
                drawn += 1
            out.write(renderer.render())
    finally:
        out.release()

    if ffmpeg_path:
        _remux(str(output_path), ffmpeg_path)
    return drawn


def _remux(output_path: str, ffmpeg_path: str) -> None:
    ffmpeg_cmd = shutil.which(ffmpeg_path)
    if ffmpeg_cmd is None:
        logger.warning(f"FFmpeg not found at {ffmpeg_path!r}, using direct output")
        return

    temp_path = f"{output_path}.temp.mp4"
    os.rename(output_path, temp_path)
    cmd = [
        ffmpeg_cmd,
        "-i", temp_path,
        "-c:v", "libx264",
        "-preset", "fast",
        "-crf", "23",
        "-pix_fmt", "yuv420p",
        "-y",  # Overwrite output file if it exists
        output_path,
    ]
    try:
        subprocess.run(cmd, check=True, capture_output=True)
        os.remove(temp_path)
    except (subprocess.CalledProcessError, OSError) as e:
        # keep the original file
        if os.path.exists(temp_path):
            os.replace(temp_path, output_path)
        logger.warning(f"FFmpeg remuxing failed, using direct output: {e}")
