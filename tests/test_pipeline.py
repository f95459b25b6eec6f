import numpy as np
import pytest

from src.patchpack.patch import PackingConfig, PackingConfigError, patches_by_id
from src.patchpack.pipeline import (
    PackingState,
    Stage,
    run_pipeline,
    start_pipeline,
)


def _start(cols: int = 3, rows: int = 6, seed: int = 0) -> PackingState:
    config = PackingConfig(width=768.0, height=768.0, padding=4.0)
    return start_pipeline(config, cols, rows, np.random.default_rng(seed))


def test_stage_sequence_and_labels() -> None:
    states = run_pipeline(_start())
    assert [s.stage for s in states] == [
        Stage.INITIAL,
        Stage.UPRIGHTED,
        Stage.SORTED_BY_HEIGHT,
        Stage.FLOWED,
        Stage.PACKED_UPWARDS,
    ]
    assert [s.stage_name() for s in states] == [
        "Initial",
        "Uprighted",
        "Sorted by Height",
        "Flowed",
        "Packed Upwards",
    ]
    assert [s.is_terminal() for s in states] == [False, False, False, False, True]


def test_advance_moves_one_stage_and_keeps_previous_intact() -> None:
    initial = _start()
    before = initial.current_patches()
    nxt = initial.advance()
    assert nxt.stage is Stage.UPRIGHTED
    assert initial.stage is Stage.INITIAL
    assert initial.current_patches() == before
    assert nxt.config is initial.config


def test_terminal_advance_is_idempotent() -> None:
    terminal = run_pipeline(_start())[-1]
    patches = terminal.current_patches()
    state = terminal
    for _ in range(3):
        state = state.advance()
        assert state is terminal
        assert state.current_patches() == patches
    assert run_pipeline(terminal) == [terminal]


@pytest.mark.parametrize("cols,rows", [(1, 1), (2, 1), (7, 3), (20, 20)])
def test_ids_preserved_through_pipeline(cols: int, rows: int) -> None:
    for state in run_pipeline(_start(cols, rows, seed=cols + rows)):
        assert sorted(p.id for p in state.current_patches()) == list(
            range(cols * rows)
        )


@pytest.mark.parametrize(
    "size,padding", [(768.0, 4.0), (768.0, 0.0), (60.0, 0.5), (10.0, 0.0)]
)
def test_packed_patches_only_move_up(size: float, padding: float) -> None:
    config = PackingConfig(width=size, height=size, padding=padding)
    states = run_pipeline(start_pipeline(config, 4, 8, np.random.default_rng(9)))
    flowed = patches_by_id(states[3].current_patches())
    packed = patches_by_id(states[4].current_patches())
    for pid, after in packed.items():
        before = flowed[pid]
        assert after.left == pytest.approx(before.left)
        assert after.top <= before.top + 1e-9


def test_left_to_right_flow_config() -> None:
    config = PackingConfig(width=400.0, height=400.0, padding=2.0, serpentine=False)
    states = run_pipeline(start_pipeline(config, 5, 5, np.random.default_rng(1)))
    flowed = states[3].current_patches()
    rows: dict[float, list[float]] = {}
    for p in flowed:
        rows.setdefault(p.top, []).append(p.left)
    for lefts in rows.values():
        assert lefts == sorted(lefts)


def test_start_pipeline_rejects_bad_grid() -> None:
    config = PackingConfig(width=100.0, height=100.0)
    with pytest.raises(PackingConfigError):
        start_pipeline(config, 0, 2, np.random.default_rng(0))


def test_stage_slug() -> None:
    assert Stage.SORTED_BY_HEIGHT.slug == "sorted_by_height"
    assert Stage.PACKED_UPWARDS.label == "Packed Upwards"
