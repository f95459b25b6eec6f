from __future__ import annotations

import numpy as np
from beartype import beartype
from beartype.typing import Sequence

from ..utils import debug, debug_helpers
from .geometry import overlap_mask, patch_boxes, probe_above
from .patch import PackingConfig, PackingConfigError, Patch

__all__ = [
    "initial_layout",
    "upright",
    "sort_by_height",
    "flow_rows",
    "pack_upwards",
]


@beartype
def initial_layout(
    config: PackingConfig,
    cols: int,
    rows: int,
    rng: np.random.Generator,
) -> list[Patch]:
    """
    One randomly sized patch centered in each cell of a cols x rows grid.
    Ids follow row-major order. Sizes are drawn from
    [min_frac, max_frac] * cell size per axis.
    """
    if cols < 1 or rows < 1:
        raise PackingConfigError(f"grid must be at least 1x1, got {cols}x{rows}")

    cell_w = config.width / cols
    cell_h = config.height / rows
    patches: list[Patch] = []
    for row in range(rows):
        for col in range(cols):
            width = float(
                rng.uniform(cell_w * config.min_frac, cell_w * config.max_frac)
            )
            height = float(
                rng.uniform(cell_h * config.min_frac, cell_h * config.max_frac)
            )
            center = (col * cell_w + cell_w / 2.0, row * cell_h + cell_h / 2.0)
            patches.append(Patch(len(patches), center, (width, height)))
    debug_helpers.log_patches("initial", patches)
    return patches


@beartype
def upright(patches: Sequence[Patch]) -> list[Patch]:
    return [p.uprighted() for p in patches]


@beartype
def sort_by_height(patches: Sequence[Patch], padding: float | int) -> list[Patch]:
    """
    Tallest first, laid out as a single row along the top edge.
    Ties keep their incoming order.
    """
    ordered = sorted(patches, key=lambda p: -p.height)
    arranged: list[Patch] = []
    for patch in ordered:
        left = arranged[-1].right + padding if arranged else padding
        arranged.append(patch.with_left_and_top(left, padding))
    return arranged


@beartype
def flow_rows(
    patches: Sequence[Patch],
    width: float | int,
    padding: float | int,
    serpentine: bool = True,
) -> list[Patch]:
    """
    Wrap patches into rows of the given canvas width, in their incoming order.

    With serpentine=True odd rows run right to left, starting flush with the
    right margin. A row never starts empty: a patch wider than the canvas is
    placed alone on its row and overflows.
    """
    result: list[Patch] = []
    y = padding
    row = 0
    row_height = 0.0
    row_count = 0
    # even rows: x is the next left edge; odd rows: x is the next right edge
    x = padding

    def reversed_row() -> bool:
        return serpentine and row % 2 == 1

    for patch in patches:
        w = patch.width
        fits = (x - w >= padding) if reversed_row() else (x + w <= width)
        if not fits and row_count > 0:
            y += row_height + padding
            row += 1
            row_height = 0.0
            row_count = 0
            x = width - padding if reversed_row() else padding

        if reversed_row():
            left = max(x - w, padding)
            x = left - padding
        else:
            left = x
            x = left + w + padding
        if left + w > width:
            debug_helpers.log_once(
                "flow_rows_overflow",
                f"flow_rows: patch {patch.id} width={w:.6g} overflows canvas "
                f"width={width:.6g}",
            )

        result.append(patch.with_left_and_top(left, y))
        row_height = max(row_height, patch.height)
        row_count += 1

    debug.log(f"flow_rows: patches={len(result)} rows={row + 1 if result else 0}")
    return result


@beartype
def pack_upwards(
    patches: Sequence[Patch],
    padding: float | int,
    eps: float | int = 1.0,
) -> list[Patch]:
    """
    Gravity-settle each patch toward the top edge, in input order.

    A patch rises until it sits padding below the lowest bottom edge among
    already settled patches that share its columns and lie above it. Its
    horizontal position never changes.

    eps is capped at half the shortest patch height, so the probe still
    reaches the previous flowed row when rows are packed tighter than eps.
    Neighbours that only touch a patch's side edge do not block it.
    """
    if not patches:
        return []
    boxes = patch_boxes(patches)
    eps = min(float(eps), 0.5 * float((boxes[:, 3] - boxes[:, 1]).min()))
    # float slack for edges that meet exactly in exact arithmetic
    tol = 1e-9 * max(1.0, float(np.abs(boxes).max()))

    placed = np.zeros((len(patches), 4), dtype=np.float64)
    result: list[Patch] = []
    for k, patch in enumerate(patches):
        resting = 0.0
        probe = probe_above(patch, eps)
        if probe is not None and k > 0:
            settled = placed[:k]
            hits = overlap_mask(probe, settled, strict=True, tol=tol)
            if hits.any():
                resting = max(float(settled[hits, 3].max()), 0.0)
        moved = patch.with_left_and_top(patch.left, resting + padding)
        placed[k] = moved.box()
        result.append(moved)
    debug_helpers.log_patches("packed", result)
    return result
