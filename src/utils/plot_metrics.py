from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path

import matplotlib
import numpy as np

from ..patchpack.metrics import METRICS_CSV_FIELDS
from .plots import plot_bounds, plot_fill_ratio, plot_run_summary
from .plots.run_summary import summary_lines


def read_stage_metrics(csv_path: Path) -> list[dict[str, str]]:
    with csv_path.open(newline="") as csv_file:
        reader = csv.DictReader(csv_file)
        if reader.fieldnames is None:
            raise ValueError("metrics.csv is missing a header row")
        missing = [
            field for field in METRICS_CSV_FIELDS if field not in reader.fieldnames
        ]
        if missing:
            raise ValueError(f"metrics.csv missing columns: {', '.join(missing)}")
        rows = list(reader)

    if not rows:
        raise ValueError("metrics.csv has no data rows")
    rows.sort(key=lambda row: int(row["stage_index"]))
    return rows


def plot_metrics(
    csv_path: Path,
    out_dir: Path,
    prefix: str,
    show: bool = False,
) -> list[Path]:
    if not show:
        matplotlib.use("Agg")
    rows = read_stage_metrics(csv_path)
    out_dir.mkdir(parents=True, exist_ok=True)

    def col_float(name: str) -> np.ndarray:
        return np.array([float(row[name]) for row in rows], dtype=np.float64)

    stages = [row["stage"] for row in rows]
    canvas_size: tuple[float, float] | None = None
    metadata_path = csv_path.with_name("metadata.json")
    written: list[Path] = []
    if metadata_path.exists():
        metadata = json.loads(metadata_path.read_text(encoding="utf-8"))
        config = metadata.get("config", {})
        if "width" in config and "height" in config:
            canvas_size = (float(config["width"]), float(config["height"]))
        summary_path = out_dir / f"{prefix}_run_summary.png"
        plot_run_summary(
            summary_path,
            f"Run {metadata.get('run_id', csv_path.parent.name)}",
            summary_lines(metadata, rows),
        )
        written.append(summary_path)

    fill_path = out_dir / f"{prefix}_fill_ratio.png"
    plot_fill_ratio(
        fill_path, stages, col_float("fill_ratio"), col_float("overlap_pairs")
    )
    bounds_path = out_dir / f"{prefix}_bounds.png"
    plot_bounds(
        bounds_path,
        stages,
        col_float("bounds_width"),
        col_float("bounds_height"),
        canvas_size,
    )
    written.extend([fill_path, bounds_path])

    if show:
        import matplotlib.pyplot as plt

        plt.show()
    return written


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--input", required=True, help="Path to metrics.csv")
    ap.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for plots (defaults to CSV directory)",
    )
    ap.add_argument(
        "--prefix",
        default=None,
        help="Output filename prefix (defaults to CSV stem)",
    )
    ap.add_argument("--show", action="store_true", help="Show plots interactively")
    args = ap.parse_args()

    csv_path = Path(args.input)
    out_dir = Path(args.out_dir) if args.out_dir is not None else csv_path.parent
    prefix = args.prefix if args.prefix is not None else csv_path.stem

    plot_metrics(csv_path, out_dir, prefix, args.show)


if __name__ == "__main__":
    main()
