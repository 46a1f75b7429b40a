from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Union
import math
import numpy as np

from .errors import ConfigurationError


@dataclass(frozen=True)
class Point3:
    """A 3D position. y is up, (x, z) is the horizontal plane."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_any(cls, value: Union["Point3", Sequence[float], np.ndarray]) -> "Point3":
        if isinstance(value, Point3):
            return value
        try:
            arr = np.asarray(value, dtype=float).reshape(-1)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Not a 3D point: {value!r}") from e
        if arr.shape != (3,):
            raise ConfigurationError(f"Expected 3 coordinates, got {arr.shape[0]}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def horizontal_offset(self, other: "Point3") -> np.ndarray:
        """Vector from self to other with the vertical component dropped."""
        return np.array([other.x - self.x, 0.0, other.z - self.z], dtype=float)

    def is_close(self, other: "Point3", tol: float = 1e-9) -> bool:
        return bool(np.allclose(self.as_array(), other.as_array(), rtol=0.0, atol=tol))

    def __add__(self, other: "Point3") -> "Point3":
        return Point3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Point3") -> "Point3":
        return Point3(self.x - other.x, self.y - other.y, self.z - other.z)

    def to_list(self) -> List[float]:
        return [self.x, self.y, self.z]


@dataclass(frozen=True)
class TrajectoryConfig:
    sample_count: int = 100        # number of polyline points, N >= 2
    launch_angle_deg: float = 45.0  # angle with the horizontal plane
    gravity: float = 10.0           # gravitational constant, > 0

    @property
    def angle_tangent(self) -> float:
        return math.tan(math.radians(self.launch_angle_deg))

    def validate(self) -> None:
        """Raise ConfigurationError if the parameters cannot produce a trajectory."""
        if isinstance(self.sample_count, bool) or not isinstance(self.sample_count, (int, np.integer)):
            raise ConfigurationError(f"sample_count must be an integer, got {self.sample_count!r}")
        if self.sample_count < 2:
            raise ConfigurationError(f"sample_count must be at least 2, got {self.sample_count}")
        if not math.isfinite(self.gravity) or self.gravity <= 0:
            raise ConfigurationError(f"gravity must be positive, got {self.gravity}")
        if not math.isfinite(self.launch_angle_deg):
            raise ConfigurationError(f"launch_angle_deg must be finite, got {self.launch_angle_deg}")

    @classmethod
    def from_dict(cls, cfg: Mapping[str, Any]) -> "TrajectoryConfig":
        defaults = cls()
        return cls(
            sample_count=cfg.get("sample_count", defaults.sample_count),
            launch_angle_deg=float(cfg.get("launch_angle_deg", defaults.launch_angle_deg)),
            gravity=float(cfg.get("gravity", defaults.gravity)),
        )


@dataclass(frozen=True, eq=False)
class TrajectoryResult:
    """Output of one solve: the sampled arc and the launch kinematics."""
    start: Point3
    finish: Point3
    points: np.ndarray              # (N, 3), points[0] == start, points[-1] == finish
    shape_coefficient: float        # A in y = x*tan(angle) - A*x^2
    launch_velocity: np.ndarray     # (3,)
    launch_speed: float
    horizontal_range: float
    angle_tangent: float

    @property
    def sample_count(self) -> int:
        return int(self.points.shape[0])

    def as_points(self) -> List[Point3]:
        return [Point3.from_any(p) for p in self.points]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "start": self.start.to_list(),
            "finish": self.finish.to_list(),
            "points": self.points.tolist(),
            "shape_coefficient": self.shape_coefficient,
            "launch_velocity": self.launch_velocity.tolist(),
            "launch_speed": self.launch_speed,
            "horizontal_range": self.horizontal_range,
        }
