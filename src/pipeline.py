from typing import Any, Callable, Dict, Optional, Tuple
from pathlib import Path
import logging
import yaml
import numpy as np

from src.data.synth import generate_moving_endpoints
from src.eval.metrics import endpoint_error, speed_consistency_error
from src.physics.errors import ConfigurationError, TrajectoryError
from src.physics.model import Point3, TrajectoryConfig, TrajectoryResult
from src.physics.solver import TrajectorySolver
from src.render.export import write_trajectory_image, write_trajectory_video
from src.render.overlay import PolylineRenderer, PolylineSink, ViewTransform
from src.scene.endpoints import EndpointProvider, FixedEndpoint, PointLike, TrackedEndpoint
from src.utils.logger import get_logger

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "defaults.yaml"


class TrajectoryTracer:
    """Keeps a polyline in sync with two endpoints that may move every frame.

    Call update() from whatever loop owns the cadence (render callback, game
    loop, test). Failures are reported to the logger and leave the tracer with
    no current result; stale values are never served.
    """

    def __init__(
        self,
        solver: TrajectorySolver,
        config: TrajectoryConfig,
        start: Optional[EndpointProvider] = None,
        finish: Optional[EndpointProvider] = None,
        sink: Optional[PolylineSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.solver = solver
        self.config = config
        self.start = start if start is not None else FixedEndpoint()
        self.finish = finish if finish is not None else FixedEndpoint()
        self.sink = sink
        self.logger = logger or logging.getLogger(__name__)
        self.last_result: Optional[TrajectoryResult] = None
        self.last_error: Optional[TrajectoryError] = None
        self.ready = self.check()

    def check(self) -> bool:
        """Validate the wiring once, logging a diagnostic for each problem found."""
        ok = True
        for label, provider in (("Start", self.start), ("Finish", self.finish)):
            if isinstance(provider, TrackedEndpoint) and provider.source is None:
                self.logger.error(f"TrajectoryTracer: {label} point is not defined")
                ok = False
        try:
            self.config.validate()
        except ConfigurationError as e:
            self.logger.error(f"TrajectoryTracer: {e}")
            ok = False
        if self.sink is None:
            self.logger.error("TrajectoryTracer: Polyline sink is not attached")
            ok = False
        elif ok:
            self.sink.set_position_count(self.config.sample_count)
        return ok

    def update(self) -> Optional[TrajectoryResult]:
        """Recompute the arc from the current endpoints and push it to the sink."""
        if not self.ready:
            return None
        try:
            result = self.solver.solve(self.start.position(), self.finish.position(), self.config)
        except TrajectoryError as e:
            self.last_result = None
            self.last_error = e
            self.sink.clear()
            self.logger.warning(f"TrajectoryTracer: {type(e).__name__}: {e}")
            return None
        self.last_result = result
        self.last_error = None
        self.sink.set_positions(result.points)
        return result

    def get_start_point(self) -> Optional[Point3]:
        point = self.start.position()
        if point is None:
            self.logger.warning("TrajectoryTracer: Start point is not defined")
        return point

    def set_start_point(self, point: PointLike) -> bool:
        return self.start.set_position(point)

    def get_finish_point(self) -> Optional[Point3]:
        point = self.finish.position()
        if point is None:
            self.logger.warning("TrajectoryTracer: Finish point is not defined")
        return point

    def set_finish_point(self, point: PointLike) -> bool:
        return self.finish.set_position(point)

    def get_launch_velocity(self) -> Optional[np.ndarray]:
        if self.last_result is None:
            self._log_missing("Launch velocity")
            return None
        return self.last_result.launch_velocity.copy()

    def get_launch_speed(self) -> Optional[float]:
        if self.last_result is None:
            self._log_missing("Launch speed")
            return None
        return self.last_result.launch_speed

    def _log_missing(self, what: str) -> None:
        if self.last_error is not None:
            self.logger.warning(f"TrajectoryTracer: {what} is not defined ({self.last_error})")
        else:
            self.logger.warning(f"TrajectoryTracer: {what} is not defined, nothing computed yet")


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    path = Path(config_path) if config_path else DEFAULT_CONFIG
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ConfigurationError(f"Config {path} must be a mapping, got {type(cfg).__name__}")
    return cfg


def build_view(cfg: Dict[str, Any]) -> ViewTransform:
    render_cfg = cfg.get("render", {})
    defaults = ViewTransform()
    return ViewTransform(
        width=int(render_cfg.get("width", defaults.width)),
        height=int(render_cfg.get("height", defaults.height)),
        scale=float(render_cfg.get("scale", defaults.scale)),
        origin=tuple(render_cfg.get("origin", defaults.origin)),
        plane=render_cfg.get("plane", defaults.plane),
    )


def build_tracer(
    cfg: Dict[str, Any],
    logger: Optional[logging.Logger] = None,
) -> Tuple[TrajectoryTracer, PolylineRenderer]:
    """Wire solver, fixed endpoints and a cv2 renderer from a loaded config."""
    render_cfg = cfg.get("render", {})
    renderer = PolylineRenderer(
        view=build_view(cfg),
        color=tuple(render_cfg.get("color", (0, 0, 255))),
        thickness=int(render_cfg.get("thickness", 2)),
    )
    endpoints = cfg.get("endpoints", {})
    start = endpoints.get("start")
    finish = endpoints.get("finish")
    tracer = TrajectoryTracer(
        solver=TrajectorySolver(),
        config=TrajectoryConfig.from_dict(cfg.get("trajectory", {})),
        start=FixedEndpoint(start),
        finish=FixedEndpoint(finish),
        sink=renderer,
        logger=logger,
    )
    return tracer, renderer


def run_pipeline(
    config_path: Optional[str],
    output_dir: str,
    progress_cb: Callable[[float, str], None] = lambda p, m: None,
) -> Dict[str, Any]:
    """Solve the configured arc, render it, then render a clip with a moving finish.

    Args:
        config_path: YAML config, defaults to configs/defaults.yaml
        output_dir: Directory to save output files
        progress_cb: Callback for progress updates (progress: float, message: str)

    Returns:
        Summary with output paths and the launch kinematics of the configured arc
    """
    cfg = load_config(config_path)
    log_level = cfg.get("logging", {}).get("level")
    logger = get_logger("arctracer", log_level=log_level)
    # library modules log under src.*
    get_logger("src", log_level=log_level)

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    tracer, renderer = build_tracer(cfg, logger=logger)
    if not tracer.ready:
        raise ConfigurationError("Tracer is not configured, see log for details")

    progress_cb(0.0, "solve")
    result = tracer.update()
    if result is None:
        raise tracer.last_error or ConfigurationError("Trajectory could not be computed")
    logger.info(
        f"Launch speed {result.launch_speed:.3f}, velocity {np.round(result.launch_velocity, 3).tolist()}, "
        f"A={result.shape_coefficient:.6g}"
    )
    logger.debug(
        f"endpoint error {endpoint_error(result):.3g}, "
        f"speed consistency {speed_consistency_error(result, tracer.config):.3g}"
    )

    progress_cb(0.2, "render")
    image_path = write_trajectory_image(
        result, str(output_dir / "trajectory.png"), view=renderer.view,
        color=renderer.color, thickness=renderer.thickness,
    )

    export_cfg = cfg.get("export", {})
    start = result.start
    frames = generate_moving_endpoints(
        num_frames=int(export_cfg.get("frames", 90)),
        start=start.to_list(),
        radius=result.horizontal_range,
        height_amplitude=float(export_cfg.get("height_amplitude", 2.0)),
    )
    progress_cb(0.4, "video")
    video_path = output_dir / "tracer.mp4"
    drawn = write_trajectory_video(
        frames,
        str(video_path),
        tracer,
        renderer,
        fps=float(export_cfg.get("fps", 30)),
        codec=export_cfg.get("codec", "mp4v"),
        ffmpeg_path=export_cfg.get("ffmpeg_path"),
    )
    logger.info(f"Drew {drawn}/{len(frames)} frames to {video_path}")

    progress_cb(1.0, "done")
    return {
        "image": image_path,
        "video": str(video_path),
        "frames_drawn": drawn,
        "launch_speed": result.launch_speed,
        "launch_velocity": result.launch_velocity.tolist(),
        "shape_coefficient": result.shape_coefficient,
    }
