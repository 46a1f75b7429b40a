from typing import Optional, Union
import logging
import math
import numpy as np

from .errors import ConfigurationError, DegenerateGeometryError, NoPhysicalSolutionError
from .model import Point3, TrajectoryConfig, TrajectoryResult

logger = logging.getLogger(__name__)


def local_height(x: Union[float, np.ndarray], angle_tangent: float, shape_coefficient: float):
    """Height above the start of the arc at horizontal distance x: x*tan(angle) - A*x^2."""
    return x * angle_tangent - shape_coefficient * x * x


def launch_speed_for(shape_coefficient: float, config: TrajectoryConfig) -> float:
    """Speed that puts a projectile on the arc with the given shape coefficient.

    Raises NoPhysicalSolutionError when A <= 0, since the speed would be imaginary.
    """
    if not shape_coefficient > 0:
        raise NoPhysicalSolutionError(
            f"No real launch speed at {config.launch_angle_deg:g} deg "
            f"(shape coefficient {shape_coefficient:.6g} <= 0): finish is out of reach",
            shape_coefficient,
        )
    tan = config.angle_tangent
    return math.sqrt(config.gravity * (1.0 + tan * tan) / (2.0 * shape_coefficient))


def shape_coefficient_for_speed(speed: float, config: TrajectoryConfig) -> float:
    """Inverse of launch_speed_for: A = g*(1 + tan^2) / (2*v^2)."""
    if not speed > 0:
        raise ConfigurationError(f"speed must be positive, got {speed}")
    tan = config.angle_tangent
    return config.gravity * (1.0 + tan * tan) / (2.0 * speed * speed)


class TrajectorySolver:
    """Fits the parabola through two points at a fixed launch angle.

    The arc lives in the vertical plane containing start and finish. With x'
    the horizontal distance from start along that plane, its height is
    y'(x') = x'*tan(angle) - A*x'^2, and A is chosen so the arc passes through
    finish. The solver keeps no state between calls.
    """

    def __init__(self, min_range: float = 1e-9):
        """
        Args:
            min_range: Horizontal distances at or below this are treated as zero.
        """
        self.min_range = min_range

    def solve(
        self,
        start: Optional[Point3],
        finish: Optional[Point3],
        config: TrajectoryConfig,
    ) -> TrajectoryResult:
        """Sample the arc from start to finish and derive the launch velocity.

        Args:
            start: Launch position.
            finish: Landing position, must differ from start horizontally.
            config: Sample count, launch angle and gravity.

        Returns:
            TrajectoryResult with config.sample_count points evenly spaced in
            horizontal displacement.

        Raises:
            ConfigurationError: missing endpoint or invalid config.
            DegenerateGeometryError: start and finish are vertically aligned.
            NoPhysicalSolutionError: the angle cannot reach finish.
        """
        if start is None:
            raise ConfigurationError("Start point is not defined")
        if finish is None:
            raise ConfigurationError("Finish point is not defined")
        config.validate()
        start = Point3.from_any(start)
        finish = Point3.from_any(finish)
        for label, point in (("Start", start), ("Finish", finish)):
            if not point.is_finite():
                raise ConfigurationError(f"{label} point has non-finite coordinates: {point}")

        horizontal = start.horizontal_offset(finish)
        d = float(np.linalg.norm(horizontal))
        if not d > self.min_range:
            raise DegenerateGeometryError(
                f"Degenerate horizontal distance {d:.3g} between {start} and {finish}: "
                "plane of motion is undefined"
            )
        rise = finish.y - start.y
        tan = config.angle_tangent

        A = (d * tan - rise) / (d * d)

        n = config.sample_count
        step = horizontal / (n - 1)
        idx = np.arange(n, dtype=float)
        offsets = idx[:, None] * step[None, :]
        heights = local_height(idx * (d / (n - 1)), tan, A)
        points = start.as_array()[None, :] + offsets
        points[:, 1] += heights
        # closed-form fit, so the last sample is the finish point itself
        points[-1] = finish.as_array()

        speed = launch_speed_for(A, config)

        direction = step + np.array([0.0, local_height(float(np.linalg.norm(step)), tan, A), 0.0])
        direction /= np.linalg.norm(direction)
        velocity = speed * direction

        logger.debug(f"Solved arc: range={d:.3f} A={A:.6g} speed={speed:.3f}")
        return TrajectoryResult(
            start=start,
            finish=finish,
            points=points,
            shape_coefficient=float(A),
            launch_velocity=velocity,
            launch_speed=float(speed),
            horizontal_range=d,
            angle_tangent=tan,
        )
