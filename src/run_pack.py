from __future__ import annotations

import argparse
from pathlib import Path
from typing import Protocol, TypedDict, cast

import numpy as np

from . import PROJECT_ROOT
from .patchpack.patch import PackingConfig
from .patchpack.pipeline import run_pipeline, start_pipeline
from .patchpack.run_output import init_pack_run, save_stage
from .utils import debug


class CliArgs(Protocol):
    cols: int
    rows: int
    width: float
    height: float
    padding: float
    seed: int
    output_dir: str
    left_to_right: bool
    gif: bool
    fps: float
    max_size: int
    plot: bool
    verbose: bool


class CliArgsDict(TypedDict):
    cols: int
    rows: int
    width: float
    height: float
    padding: float
    seed: int
    output_dir: str
    left_to_right: bool
    gif: bool
    fps: float
    max_size: int
    plot: bool
    verbose: bool


class RunParams(TypedDict):
    cli_args: CliArgsDict
    command: str


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Pack random patches into an atlas, one SVG per stage"
    )
    ap.add_argument("--cols", type=int, default=3, help="Grid columns")
    ap.add_argument("--rows", type=int, default=6, help="Grid rows")
    ap.add_argument("--width", type=float, default=768.0, help="Canvas width")
    ap.add_argument("--height", type=float, default=768.0, help="Canvas height")
    ap.add_argument("--padding", type=float, default=4.0, help="Gap between patches")
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument(
        "--output-dir",
        default=str(PROJECT_ROOT / "data" / "runs"),
        help="Base directory; each run gets its own subdirectory",
    )
    ap.add_argument(
        "--left-to-right",
        action="store_true",
        help="Flow every row left to right instead of alternating direction",
    )
    ap.add_argument("--gif", action="store_true", help="Also write stages.gif")
    ap.add_argument("--fps", type=float, default=12.0, help="GIF frames per second")
    ap.add_argument(
        "--max-size",
        type=int,
        default=480,
        help="Max width or height for GIF frames",
    )
    ap.add_argument(
        "--plot", action="store_true", help="Plot per-stage metrics with matplotlib"
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logs")
    return ap


def validate_args(args: CliArgs) -> None:
    if args.cols < 1 or args.rows < 1:
        raise ValueError("cols and rows must be >= 1")
    if args.width <= 0 or args.height <= 0:
        raise ValueError("width and height must be positive")
    if args.padding < 0:
        raise ValueError("padding must be >= 0")
    if args.fps <= 0:
        raise ValueError("--fps must be > 0")
    if args.max_size <= 0:
        raise ValueError("--max-size must be > 0")


def run(argv: list[str] | None = None) -> Path:
    args = cast(CliArgs, build_parser().parse_args(argv))
    validate_args(args)
    debug.set_verbose(args.verbose)

    config = PackingConfig(
        width=args.width,
        height=args.height,
        padding=args.padding,
        serpentine=not args.left_to_right,
    )
    rng = np.random.default_rng(args.seed)

    cli_args = cast(CliArgsDict, dict(vars(args)))
    run_params: RunParams = {"cli_args": cli_args, "command": "patchpack-run"}
    pack_run = init_pack_run(
        Path(args.output_dir),
        config,
        (args.cols, args.rows),
        args.seed,
        dict(run_params),
    )

    states = run_pipeline(start_pipeline(config, args.cols, args.rows, rng))
    for stage_index, state in enumerate(states):
        save_stage(pack_run, stage_index, state)

    if args.gif:
        from .utils.stage_gif import render_transition_frames, save_gif

        frames = render_transition_frames(states, max_size=args.max_size)
        save_gif(frames, pack_run.run_dir / "stages.gif", fps=args.fps)

    if args.plot:
        from .utils.plot_metrics import plot_metrics

        plot_metrics(pack_run.csv_path, pack_run.run_dir, "stages")

    final = states[-1]
    print(
        f"Saved: {pack_run.run_dir}  stages={len(states)}  "
        f"patches={len(final.patches)}  final={final.stage_name()}"
    )
    return pack_run.run_dir


def main() -> None:
    run()


if __name__ == "__main__":
    main()
