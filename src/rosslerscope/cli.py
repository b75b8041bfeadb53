"""
CLI entry point for offline rendering of the Rössler attractor.

Usage:
    rosslerscope-render [options]
    python -m rosslerscope [options]
"""

import argparse
import logging
import math
import shutil
import sys
import time
from pathlib import Path

from rosslerscope.app import AppConfig, AttractorApp
from rosslerscope.core.reveal import RevealConfig
from rosslerscope.core.trajectory import DEFAULT_PARAMETERS, Parameters
from rosslerscope.render.base import SceneConfig
from rosslerscope.render.encoder import encode_video

PROFILES = {
    "low": {"width": 854, "height": 480, "fps": 30, "quality": "fast"},
    "medium": {"width": 1280, "height": 720, "fps": 60, "quality": "medium"},
    "high": {"width": 1920, "height": 1080, "fps": 60, "quality": "high"},
}


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def add_parameter_arguments(parser: argparse.ArgumentParser):
    """Equation coefficient and reveal flags shared by the CLIs."""
    parser.add_argument("--a", type=float, default=DEFAULT_PARAMETERS.a, help="Rössler a (default: 0.2)")
    parser.add_argument("--b", type=float, default=DEFAULT_PARAMETERS.b, help="Rössler b (default: 0.2)")
    parser.add_argument("--c", type=float, default=DEFAULT_PARAMETERS.c, help="Rössler c (default: 5.7)")
    parser.add_argument(
        "--points", type=int, default=10_000,
        help="Number of trajectory points (default: 10000)",
    )
    parser.add_argument(
        "--batch", type=int, default=20,
        help="Points revealed per frame (default: 20)",
    )
    parser.add_argument(
        "--no-loop", action="store_true",
        help="Hold the finished curve instead of restarting every 30s",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def build_config(args: argparse.Namespace, width: int, height: int, fps: int) -> AppConfig:
    """Translate parsed flags into an AppConfig."""
    params = Parameters(args.a, args.b, args.c)
    return AppConfig(
        scene=SceneConfig(
            width=width,
            height=height,
            fps=fps,
            glow_enabled=not getattr(args, "no_glow", False),
            vignette_strength=0.0 if getattr(args, "no_vignette", False) else 0.3,
        ),
        reveal=RevealConfig(batch_size=args.batch, looping=not args.no_loop),
        initial=params,
        num_points=args.points,
    )


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    parser = argparse.ArgumentParser(
        prog="rosslerscope-render",
        description="Render the progressively drawn Rössler attractor to MP4",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("rossler.mp4"),
        help="Output MP4 path (default: rossler.mp4)",
    )

    # Resolution & Profile
    parser.add_argument(
        "-p", "--profile", type=str, default="medium",
        choices=list(PROFILES),
        help="Target profile (low: 480p 30fps, medium: 720p 60fps, high: 1080p 60fps)",
    )
    parser.add_argument("--width", type=int, default=None, help="Video width (overrides profile)")
    parser.add_argument("--height", type=int, default=None, help="Video height (overrides profile)")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Frames per second (overrides profile)")
    parser.add_argument(
        "-d", "--duration", type=float, default=None,
        help="Length in seconds (default: time to reveal the whole curve plus 2s)",
    )
    parser.add_argument(
        "--audio", type=Path, default=None,
        help="Optional soundtrack to mux into the video",
    )

    add_parameter_arguments(parser)

    # Post-processing
    parser.add_argument("--no-glow", action="store_true", help="Disable bloom")
    parser.add_argument("--no-vignette", action="store_true", help="Disable vignette")

    parser.add_argument(
        "-q", "--quality", type=str, default=None,
        choices=["high", "medium", "fast"],
        help="Encoding quality (defaults to profile quality)",
    )

    args = parser.parse_args()
    configure_logging(args.verbose)

    if shutil.which("ffmpeg") is None:
        print("Error: ffmpeg not found on PATH", file=sys.stderr)
        sys.exit(1)
    if args.audio is not None and not args.audio.exists():
        print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
        sys.exit(1)

    p_cfg = PROFILES[args.profile]
    width = args.width or p_cfg["width"]
    height = args.height or p_cfg["height"]
    fps = args.fps or p_cfg["fps"]
    quality = args.quality or p_cfg["quality"]

    try:
        config = build_config(args, width, height, fps)
        # Step 1: Trajectory
        print(f"Integrating Rössler system: a={args.a} b={args.b} c={args.c}")
        t0 = time.time()
        app = AttractorApp(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    duration = args.duration
    if duration is None:
        reveal_frames = math.ceil(config.num_points / config.reveal.batch_size)
        duration = reveal_frames / fps + 2.0
    total_frames = max(1, int(round(duration * fps)))

    trajectory = app.trajectory
    print(f"  Points: {len(trajectory)}")
    if trajectory.drawable_length < len(trajectory):
        print(f"  Warning: diverged after {trajectory.drawable_length} points")
    print(f"  Integration took {time.time() - t0:.2f}s")

    # Step 2: Render + encode
    print(f"\nRendering {total_frames} frames at {width}x{height} @ {fps}fps")
    t1 = time.time()
    with app:
        encode_video(
            frame_iterator=app.render_frames(total_frames, progress_callback=_progress_bar),
            output_path=args.output,
            width=width,
            height=height,
            fps=fps,
            quality=quality,
            audio_path=args.audio,
            duration=duration,
        )

    elapsed = time.time() - t1
    file_size_mb = args.output.stat().st_size / 1024 / 1024

    print(f"\nDone! {file_size_mb:.1f} MB")
    print(f"  Render+encode took {elapsed:.1f}s ({total_frames / max(elapsed, 0.01):.1f} fps)")
    print(f"  Output: {args.output}")


if __name__ == "__main__":
    main()
