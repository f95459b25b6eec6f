from __future__ import annotations

import csv
import itertools
import json
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from ..utils import debug
from .export_svg import export_patches_svg
from .metrics import METRICS_CSV_FIELDS, layout_metrics, metrics_row
from .patch import PackingConfig
from .pipeline import PackingState


@dataclass(frozen=True)
class PackRun:
    run_dir: Path
    csv_path: Path


def init_pack_run(
    base_dir: Path,
    config: PackingConfig,
    grid: tuple[int, int],
    seed: int,
    extra: dict[str, Any] | None = None,
) -> PackRun:
    """
    Create a run directory named after the grid and seed, and record in
    metadata.json what is needed to reproduce its layouts. A repeated run in
    the same second gets a numeric suffix.
    """
    base_dir.mkdir(parents=True, exist_ok=True)
    created = datetime.now()
    cols, rows = grid
    stem = f"{cols}x{rows}_seed{seed}_{created:%Y%m%d-%H%M%S}"
    for attempt in itertools.count():
        run_id = stem if attempt == 0 else f"{stem}_{attempt}"
        run_dir = base_dir / run_id
        try:
            run_dir.mkdir()
        except FileExistsError:
            continue
        break

    metadata: dict[str, Any] = dict(extra or {})
    metadata.update(
        run_id=run_id,
        created_at=created.isoformat(timespec="seconds"),
        grid={"cols": cols, "rows": rows},
        seed=seed,
        config=asdict(config),
    )
    (run_dir / "metadata.json").write_text(
        json.dumps(metadata, indent=2, sort_keys=True), encoding="utf-8"
    )
    debug.log(f"run dir={run_dir}")
    return PackRun(run_dir=run_dir, csv_path=run_dir / "metrics.csv")


def append_metrics_csv(
    csv_path: Path,
    fieldnames: list[str],
    row: dict[str, Any],
) -> None:
    write_header = not csv_path.exists()
    with csv_path.open("a", newline="") as csv_file:
        writer = csv.DictWriter(csv_file, fieldnames=fieldnames)
        if write_header:
            writer.writeheader()
        writer.writerow(row)


def save_stage(run: PackRun, stage_index: int, state: PackingState) -> Path:
    """Write the stage's SVG and append its metrics row."""
    svg_path = run.run_dir / f"stage_{stage_index}_{state.stage.slug}.svg"
    start_svg = time.perf_counter()
    export_patches_svg(
        str(svg_path),
        state.patches,
        (state.config.width, state.config.height),
        label=state.stage_name(),
    )
    svg_elapsed = time.perf_counter() - start_svg

    metrics = layout_metrics(state.patches)
    append_metrics_csv(
        run.csv_path,
        METRICS_CSV_FIELDS,
        metrics_row(stage_index, state.stage_name(), metrics),
    )
    debug.log(
        f"stage {stage_index} {state.stage_name()}: svg={svg_path.name} "
        f"time={svg_elapsed:.3f}s fill={metrics.fill_ratio:.3f} "
        f"height={metrics.bounds_height:.6g} overlaps={metrics.overlap_pairs}"
    )
    return svg_path
