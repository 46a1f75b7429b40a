import math

import numpy as np
import pytest

from src.eval.metrics import endpoint_error, horizontal_steps, spacing_error, speed_consistency_error
from src.physics.errors import (
    ConfigurationError,
    DegenerateGeometryError,
    NoPhysicalSolutionError,
    TrajectoryError,
)
from src.physics.model import Point3, TrajectoryConfig
from src.physics.solver import (
    TrajectorySolver,
    launch_speed_for,
    local_height,
    shape_coefficient_for_speed,
)


@pytest.fixture
def solver():
    return TrajectorySolver()


def test_boundary_scenario_45_degrees(solver):
    cfg = TrajectoryConfig(sample_count=3, launch_angle_deg=45, gravity=10)
    result = solver.solve(Point3(0, 0, 0), Point3(10, 0, 0), cfg)

    assert result.shape_coefficient == pytest.approx(0.1)
    np.testing.assert_allclose(result.points[1], [5.0, 2.5, 0.0], atol=1e-12)
    assert result.launch_speed == pytest.approx(10.0)
    assert result.horizontal_range == pytest.approx(10.0)
    # direction of the first chord: (5, 2.5, 0)
    np.testing.assert_allclose(result.launch_velocity, 10.0 * np.array([2.0, 1.0, 0.0]) / math.sqrt(5.0))
    assert np.linalg.norm(result.launch_velocity) == pytest.approx(result.launch_speed)


def test_endpoints_are_exact(solver):
    start = Point3(1.5, 2.0, -3.0)
    finish = Point3(-7.25, -1.0, 4.5)
    cfg = TrajectoryConfig(sample_count=57, launch_angle_deg=60, gravity=9.81)
    result = solver.solve(start, finish, cfg)

    assert result.points.shape == (57, 3)
    assert np.array_equal(result.points[0], start.as_array())
    assert np.array_equal(result.points[-1], finish.as_array())
    assert endpoint_error(result) == 0.0


def test_samples_evenly_spaced_horizontally(solver):
    start = Point3(0, 1, 0)
    finish = Point3(12, 3, -5)
    result = solver.solve(start, finish, TrajectoryConfig(sample_count=40, launch_angle_deg=35))

    steps = horizontal_steps(result)
    assert np.all(steps > 0)
    assert spacing_error(result) < 1e-9

    direction = start.horizontal_offset(finish) / result.horizontal_range
    along = (result.points - start.as_array()) @ direction
    assert np.all(np.diff(along) > 0)
    np.testing.assert_allclose(along, np.linspace(0, result.horizontal_range, 40), atol=1e-9)


def test_heights_follow_parabola(solver):
    start = Point3(2, 1, 2)
    finish = Point3(8, -2, 10)
    result = solver.solve(start, finish, TrajectoryConfig(sample_count=11, launch_angle_deg=40))

    xs = np.linspace(0, result.horizontal_range, 11)
    expected = start.y + local_height(xs, result.angle_tangent, result.shape_coefficient)
    np.testing.assert_allclose(result.points[:, 1], expected, atol=1e-9)


def test_solve_is_idempotent(solver):
    start, finish = Point3(0.3, 0.7, 1.1), Point3(9.9, -0.4, 3.3)
    cfg = TrajectoryConfig(sample_count=25, launch_angle_deg=52.5, gravity=9.80665)
    a = solver.solve(start, finish, cfg)
    b = solver.solve(start, finish, cfg)

    assert np.array_equal(a.points, b.points)
    assert np.array_equal(a.launch_velocity, b.launch_velocity)
    assert a.launch_speed == b.launch_speed
    assert a.shape_coefficient == b.shape_coefficient


def test_speed_consistency(solver):
    cfg = TrajectoryConfig(sample_count=10, launch_angle_deg=30, gravity=9.81)
    result = solver.solve(Point3(0, 0, 0), Point3(15, -4, 6), cfg)

    assert shape_coefficient_for_speed(result.launch_speed, cfg) == pytest.approx(result.shape_coefficient)
    assert speed_consistency_error(result, cfg) < 1e-12


def test_launch_velocity_points_up_and_toward_finish(solver):
    result = solver.solve(Point3(0, 0, 0), Point3(0, 0, 20), TrajectoryConfig(launch_angle_deg=45))
    v = result.launch_velocity
    assert v[1] > 0
    assert v[2] > 0
    assert v[0] == pytest.approx(0.0)


def test_vertically_aligned_endpoints_are_degenerate(solver):
    with pytest.raises(DegenerateGeometryError):
        solver.solve(Point3(1, 0, 1), Point3(1, 5, 1), TrajectoryConfig())


def test_degenerate_is_a_division_by_zero(solver):
    with pytest.raises(ZeroDivisionError):
        solver.solve(Point3(0, 0, 0), Point3(0, 0, 0), TrajectoryConfig())


def test_single_sample_rejected_before_sampling(solver):
    # geometry is degenerate too, but the config is checked first
    with pytest.raises(ConfigurationError):
        solver.solve(Point3(0, 0, 0), Point3(0, 5, 0), TrajectoryConfig(sample_count=1))


@pytest.mark.parametrize("cfg", [
    TrajectoryConfig(sample_count=0),
    TrajectoryConfig(sample_count=2.5),
    TrajectoryConfig(gravity=0.0),
    TrajectoryConfig(gravity=-9.81),
    TrajectoryConfig(launch_angle_deg=float("nan")),
])
def test_invalid_config(solver, cfg):
    with pytest.raises(ConfigurationError):
        solver.solve(Point3(0, 0, 0), Point3(10, 0, 0), cfg)


def test_missing_endpoint(solver):
    with pytest.raises(ConfigurationError, match="Finish point"):
        solver.solve(Point3(0, 0, 0), None, TrajectoryConfig())
    with pytest.raises(ConfigurationError, match="Start point"):
        solver.solve(None, Point3(0, 0, 0), TrajectoryConfig())


def test_finish_out_of_reach(solver):
    with pytest.raises(NoPhysicalSolutionError) as exc:
        solver.solve(Point3(0, 0, 0), Point3(10, 20, 0), TrajectoryConfig(launch_angle_deg=30))
    assert exc.value.shape_coefficient < 0
    assert isinstance(exc.value, TrajectoryError)


def test_finish_on_launch_line_has_no_solution(solver):
    cfg = TrajectoryConfig(launch_angle_deg=45)
    finish = Point3(10, 10 * cfg.angle_tangent, 0)
    with pytest.raises(NoPhysicalSolutionError):
        solver.solve(Point3(0, 0, 0), finish, cfg)


def test_launch_speed_for_rejects_non_positive():
    with pytest.raises(NoPhysicalSolutionError):
        launch_speed_for(0.0, TrajectoryConfig())
    assert launch_speed_for(0.1, TrajectoryConfig(launch_angle_deg=45, gravity=10)) == pytest.approx(10.0)


def test_accepts_sequences_as_points(solver):
    result = solver.solve((0, 0, 0), np.array([10.0, 0.0, 0.0]), TrajectoryConfig(sample_count=3))
    assert result.finish == Point3(10.0, 0.0, 0.0)
    assert result.as_points()[1].is_close(Point3(5.0, 2.5, 0.0), tol=1e-9)


def test_to_dict():
    result = TrajectorySolver().solve(Point3(0, 0, 0), Point3(4, 0, 3), TrajectoryConfig(sample_count=4))
    d = result.to_dict()
    assert d["start"] == [0.0, 0.0, 0.0]
    assert d["finish"] == [4.0, 0.0, 3.0]
    assert len(d["points"]) == 4
    assert d["horizontal_range"] == pytest.approx(5.0)


@pytest.mark.parametrize("finish", [
    Point3(10, float("nan"), 0),
    Point3(float("nan"), 0, 0),
    Point3(float("inf"), 0, 0),
    Point3(10, 0, float("-inf")),
])
def test_non_finite_endpoint_is_invalid_input(solver, finish):
    with pytest.raises(ConfigurationError, match="non-finite"):
        solver.solve(Point3(0, 0, 0), finish, TrajectoryConfig())
    with pytest.raises(ConfigurationError, match="non-finite"):
        solver.solve(finish, Point3(0, 0, 0), TrajectoryConfig())


def test_non_numeric_endpoint_is_invalid_input(solver):
    with pytest.raises(ConfigurationError):
        solver.solve(Point3(0, 0, 0), "far away", TrajectoryConfig())
