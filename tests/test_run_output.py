import csv
import json
from datetime import datetime
from pathlib import Path

import numpy as np
import pytest

from src.patchpack import run_output
from src.patchpack.patch import PackingConfig
from src.patchpack.pipeline import start_pipeline
from src.patchpack.run_output import init_pack_run, save_stage


class _FixedClock:
    @staticmethod
    def now() -> datetime:
        return datetime(2024, 5, 1, 12, 30, 0)


def test_init_pack_run_names_dir_after_grid_and_seed(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(run_output, "datetime", _FixedClock)
    config = PackingConfig(width=64.0, height=32.0, padding=0.0)

    first = init_pack_run(tmp_path, config, (2, 3), 5, {"note": "a"})
    second = init_pack_run(tmp_path, config, (2, 3), 5)

    assert first.run_dir.name == "2x3_seed5_20240501-123000"
    assert second.run_dir.name == "2x3_seed5_20240501-123000_1"
    assert first.csv_path == first.run_dir / "metrics.csv"

    metadata = json.loads((first.run_dir / "metadata.json").read_text(encoding="utf-8"))
    assert metadata["note"] == "a"
    assert metadata["run_id"] == first.run_dir.name
    assert metadata["created_at"] == "2024-05-01T12:30:00"
    assert metadata["grid"] == {"cols": 2, "rows": 3}
    assert metadata["seed"] == 5
    assert metadata["config"]["width"] == 64.0
    assert metadata["config"]["padding"] == 0.0


def test_save_stage_writes_svg_and_one_csv_row_per_stage(tmp_path: Path) -> None:
    config = PackingConfig(width=100.0, height=100.0)
    pack_run = init_pack_run(tmp_path, config, (2, 2), 0)
    state = start_pipeline(config, 2, 2, np.random.default_rng(0))

    first = save_stage(pack_run, 0, state)
    second = save_stage(pack_run, 1, state.advance())

    assert first.name == "stage_0_initial.svg"
    assert second.name == "stage_1_uprighted.svg"
    assert first.exists() and second.exists()
    with pack_run.csv_path.open(newline="") as f:
        rows = list(csv.DictReader(f))
    assert [row["stage"] for row in rows] == ["Initial", "Uprighted"]
    assert all(int(row["count"]) == 4 for row in rows)
