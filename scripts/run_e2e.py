import argparse
from pathlib import Path
import sys
import os

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.physics.errors import TrajectoryError  # noqa: E402
from src.pipeline import run_pipeline  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Render a parabolic arc and a clip with a moving finish point")
    parser.add_argument("--outdir", type=str, default="outputs", help="Output directory for results")
    parser.add_argument("--config", type=str, default="configs/defaults.yaml", help="Path to config file")
    parser.add_argument("--no-open", action="store_true", help="Do not auto-open the output video")
    args = parser.parse_args()

    def progress(p, m):
        print(f"[{p*100:5.1f}%] {m}")

    try:
        summary = run_pipeline(args.config, args.outdir, progress_cb=progress)
    except TrajectoryError as e:
        print(f"Could not compute trajectory: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Launch speed: {summary['launch_speed']:.3f}")
    print("Launch velocity:", [round(v, 3) for v in summary["launch_velocity"]])
    out_video = Path(summary["video"])
    print("Done. Output video:", out_video)

    if not args.no_open and out_video.exists():
        try:
            if sys.platform.startswith("win"):
                os.startfile(str(out_video))  # type: ignore[attr-defined]
            elif sys.platform == "darwin":
                os.system(f"open \"{out_video}\"")
            else:
                os.system(f"xdg-open \"{out_video}\"")
        except OSError as e:
            print("Could not open video automatically:", e)


if __name__ == "__main__":
    main()
