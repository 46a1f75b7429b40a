class TrajectoryError(Exception):
    """Base class for every failure raised while solving a trajectory."""


class ConfigurationError(TrajectoryError, ValueError):
    """Missing endpoints or invalid solver parameters (sample count, gravity, angle)."""


class DegenerateGeometryError(TrajectoryError, ZeroDivisionError):
    """Start and finish share the same horizontal position, so the plane of motion is undefined."""


class NoPhysicalSolutionError(TrajectoryError, ValueError):
    """The launch angle cannot reach the finish point: the launch speed would be imaginary."""

    def __init__(self, message: str, shape_coefficient: float):
        super().__init__(message)
        self.shape_coefficient = shape_coefficient
