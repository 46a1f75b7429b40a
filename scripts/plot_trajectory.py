#!/usr/bin/env python3
"""
Plot a solved arc in 3D together with its launch velocity vector.
"""
import argparse
from pathlib import Path
import sys

import numpy as np
import matplotlib.pyplot as plt

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from src.physics.model import Point3, TrajectoryConfig
from src.physics.solver import TrajectorySolver


def plot_result(result, output_path=None):
    fig = plt.figure(figsize=(10, 6))
    ax = fig.add_subplot(111, projection="3d")

    pts = result.points
    # matplotlib's z axis is up, world y is up
    ax.plot(pts[:, 0], pts[:, 2], pts[:, 1], "r-", linewidth=2, label="Trajectory")
    ax.scatter(*result.start.as_array()[[0, 2, 1]], color="green", s=40, label="Start")
    ax.scatter(*result.finish.as_array()[[0, 2, 1]], color="blue", s=40, label="Finish")

    v = result.launch_velocity / max(result.launch_speed, 1e-9) * result.horizontal_range * 0.2
    ax.quiver(pts[0, 0], pts[0, 2], pts[0, 1], v[0], v[2], v[1], color="black",
              label=f"Launch velocity ({result.launch_speed:.2f})")

    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_zlabel("y (up)")
    ax.set_title(f"A = {result.shape_coefficient:.4g}")
    ax.legend()

    if output_path:
        plt.savefig(output_path, dpi=150, bbox_inches="tight")
        print(f"Saved plot to {output_path}")
    else:
        plt.show()


def main():
    parser = argparse.ArgumentParser(description="Plot a parabolic trajectory between two points")
    parser.add_argument("--start", type=float, nargs=3, default=[0.0, 0.0, 0.0])
    parser.add_argument("--finish", type=float, nargs=3, default=[10.0, 0.0, 5.0])
    parser.add_argument("--angle", type=float, default=45.0, help="Launch angle in degrees")
    parser.add_argument("--gravity", type=float, default=10.0)
    parser.add_argument("--samples", type=int, default=100)
    parser.add_argument("--output", type=str, default=None, help="Save to file instead of showing")
    args = parser.parse_args()

    config = TrajectoryConfig(sample_count=args.samples, launch_angle_deg=args.angle, gravity=args.gravity)
    result = TrajectorySolver().solve(Point3(*args.start), Point3(*args.finish), config)
    print(f"Launch speed: {result.launch_speed:.3f}")
    print(f"Launch velocity: {np.round(result.launch_velocity, 3).tolist()}")
    plot_result(result, args.output)


if __name__ == "__main__":
    main()
