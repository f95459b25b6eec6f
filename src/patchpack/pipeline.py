from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np

from ..utils import debug
from .patch import PackingConfig, Patch
from .stages import flow_rows, initial_layout, pack_upwards, sort_by_height, upright

__all__ = ["Stage", "PackingState", "start_pipeline", "run_pipeline"]


class Stage(Enum):
    INITIAL = "Initial"
    UPRIGHTED = "Uprighted"
    SORTED_BY_HEIGHT = "Sorted by Height"
    FLOWED = "Flowed"
    PACKED_UPWARDS = "Packed Upwards"

    @property
    def label(self) -> str:
        return self.value

    @property
    def slug(self) -> str:
        return self.name.lower()


StageTransform = Callable[[tuple[Patch, ...], PackingConfig], list[Patch]]


def _to_uprighted(patches: tuple[Patch, ...], config: PackingConfig) -> list[Patch]:
    return upright(patches)


def _to_sorted(patches: tuple[Patch, ...], config: PackingConfig) -> list[Patch]:
    return sort_by_height(patches, config.padding)


def _to_flowed(patches: tuple[Patch, ...], config: PackingConfig) -> list[Patch]:
    return flow_rows(patches, config.width, config.padding, config.serpentine)


def _to_packed(patches: tuple[Patch, ...], config: PackingConfig) -> list[Patch]:
    return pack_upwards(patches, config.padding)


# PACKED_UPWARDS has no entry: it is terminal.
_TRANSITIONS: dict[Stage, tuple[Stage, StageTransform]] = {
    Stage.INITIAL: (Stage.UPRIGHTED, _to_uprighted),
    Stage.UPRIGHTED: (Stage.SORTED_BY_HEIGHT, _to_sorted),
    Stage.SORTED_BY_HEIGHT: (Stage.FLOWED, _to_flowed),
    Stage.FLOWED: (Stage.PACKED_UPWARDS, _to_packed),
}


@dataclass(frozen=True)
class PackingState:
    """One stage of the packing pipeline together with its complete layout."""

    stage: Stage
    patches: tuple[Patch, ...]
    config: PackingConfig

    def current_patches(self) -> tuple[Patch, ...]:
        return self.patches

    def stage_name(self) -> str:
        return self.stage.label

    def is_terminal(self) -> bool:
        return self.stage not in _TRANSITIONS

    def advance(self) -> PackingState:
        """Next stage's state; the terminal state returns itself."""
        transition = _TRANSITIONS.get(self.stage)
        if transition is None:
            return self
        next_stage, transform = transition
        patches = tuple(transform(self.patches, self.config))
        debug.log(f"advance: {self.stage.label} -> {next_stage.label}")
        return PackingState(stage=next_stage, patches=patches, config=self.config)


def start_pipeline(
    config: PackingConfig,
    cols: int,
    rows: int,
    rng: np.random.Generator,
) -> PackingState:
    patches = initial_layout(config, cols, rows, rng)
    return PackingState(stage=Stage.INITIAL, patches=tuple(patches), config=config)


def run_pipeline(state: PackingState) -> list[PackingState]:
    """Every state from the given one through the terminal one, inclusive."""
    states = [state]
    while not states[-1].is_terminal():
        states.append(states[-1].advance())
    return states
