import numpy as np

from src.physics.model import TrajectoryConfig, TrajectoryResult
from src.physics.solver import shape_coefficient_for_speed


def endpoint_error(result: TrajectoryResult) -> float:
    """Largest distance between the arc's ends and the requested endpoints."""
    err_start = np.linalg.norm(result.points[0] - result.start.as_array())
    err_finish = np.linalg.norm(result.points[-1] - result.finish.as_array())
    return float(max(err_start, err_finish))


def horizontal_steps(result: TrajectoryResult) -> np.ndarray:
    """Horizontal (x, z) distance covered between consecutive samples."""
    diffs = np.diff(result.points[:, [0, 2]], axis=0)
    return np.hypot(diffs[:, 0], diffs[:, 1])


def spacing_error(result: TrajectoryResult) -> float:
    """Max deviation of the horizontal steps from an even split of the range."""
    expected = result.horizontal_range / (result.sample_count - 1)
    return float(np.max(np.abs(horizontal_steps(result) - expected)))


def speed_consistency_error(result: TrajectoryResult, config: TrajectoryConfig) -> float:
    """Relative error of A re-derived from the launch speed."""
    a = shape_coefficient_for_speed(result.launch_speed, config)
    return abs(a - result.shape_coefficient) / abs(result.shape_coefficient)
