from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable


class PackingConfigError(ValueError):
    """Raised when a layout configuration cannot produce valid patches."""


@dataclass(frozen=True)
class PackingConfig:
    """
    Canvas and layout parameters shared by every stage.

    width/height: canvas size; the packed layout may exceed height.
    padding: gap kept between patches and around the canvas edge.
    serpentine: alternate row direction in the flow stage.
    min_frac/max_frac: initial patch size range as a fraction of its grid cell.
    """

    width: float
    height: float
    padding: float = 4.0
    serpentine: bool = True
    min_frac: float = 0.5
    max_frac: float = 1.1

    def __post_init__(self) -> None:
        for name in ("width", "height", "padding", "min_frac", "max_frac"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise PackingConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise PackingConfigError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, float(value))
        if self.width <= 0:
            raise PackingConfigError(f"width must be positive, got {self.width}")
        if self.height <= 0:
            raise PackingConfigError(f"height must be positive, got {self.height}")
        if self.padding < 0:
            raise PackingConfigError(f"padding must be >= 0, got {self.padding}")
        if not 0 < self.min_frac <= self.max_frac:
            raise PackingConfigError(
                "size fractions must satisfy 0 < min_frac <= max_frac, "
                f"got min_frac={self.min_frac} max_frac={self.max_frac}"
            )


@dataclass(frozen=True)
class Patch:
    id: int
    center: tuple[float, float]
    extent: tuple[float, float]
    rotation: float = 0.0

    def __post_init__(self) -> None:
        w, h = self.extent
        if not (math.isfinite(w) and math.isfinite(h)) or w <= 0 or h <= 0:
            raise ValueError(
                f"patch {self.id} extent must be finite and positive, got {self.extent}"
            )

    @property
    def width(self) -> float:
        return self.extent[0]

    @property
    def height(self) -> float:
        return self.extent[1]

    @property
    def left(self) -> float:
        return self.center[0] - self.extent[0] / 2.0

    @property
    def right(self) -> float:
        return self.center[0] + self.extent[0] / 2.0

    @property
    def top(self) -> float:
        return self.center[1] - self.extent[1] / 2.0

    @property
    def bottom(self) -> float:
        return self.center[1] + self.extent[1] / 2.0

    def box(self) -> tuple[float, float, float, float]:
        return (self.left, self.top, self.right, self.bottom)

    def uprighted(self) -> Patch:
        """Swap to portrait orientation; square and tall patches are kept as is."""
        if self.width > self.height:
            return replace(
                self,
                extent=(self.extent[1], self.extent[0]),
                rotation=90.0,
            )
        return replace(self)

    def with_left_and_top(self, left: float, top: float) -> Patch:
        return replace(
            self,
            center=(left + self.extent[0] / 2.0, top + self.extent[1] / 2.0),
        )


def patches_by_id(patches: Iterable[Patch]) -> dict[int, Patch]:
    out: dict[int, Patch] = {}
    for patch in patches:
        if patch.id in out:
            raise ValueError(f"duplicate patch id {patch.id}")
        out[patch.id] = patch
    return out
