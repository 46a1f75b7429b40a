from typing import List, Optional, Tuple
import numpy as np

from src.physics.model import Point3


def generate_moving_endpoints(
    num_frames: int = 90,
    start: Tuple[float, float, float] = (0.0, 0.0, 0.0),
    radius: float = 20.0,
    sweep_deg: float = 120.0,
    height_amplitude: float = 3.0,
    seed: Optional[int] = None,
    jitter: float = 0.0,
) -> List[Tuple[Point3, Point3]]:
    """Build a (start, finish) pair per frame with the finish orbiting the start.

    The finish sweeps an arc of sweep_deg around start in the horizontal plane
    while bobbing up and down, so consecutive frames need a fresh solve.
    """
    rng = np.random.default_rng(seed)
    p0 = Point3.from_any(start)
    frames = []
    for i in range(num_frames):
        phase = i / max(1, num_frames - 1)
        heading = np.radians(-sweep_deg / 2 + sweep_deg * phase)
        x = p0.x + radius * np.cos(heading)
        z = p0.z + radius * np.sin(heading)
        y = p0.y + height_amplitude * np.sin(2 * np.pi * phase)
        if jitter > 0:
            x, y, z = np.array([x, y, z]) + rng.normal(0, jitter, 3)
        frames.append((p0, Point3(float(x), float(y), float(z))))
    return frames
