from __future__ import annotations

from typing import TypeAlias

import numpy as np
from beartype import beartype
from beartype.typing import Sequence
from jaxtyping import Bool, Float, jaxtyped

from .patch import Patch

Box: TypeAlias = tuple[float, float, float, float]
NpBoxes: TypeAlias = Float[np.ndarray, "N 4"]


@jaxtyped(typechecker=beartype)
def patch_boxes(patches: Sequence[Patch]) -> NpBoxes:
    """
    Returns (N,4) float64 rows of (left, top, right, bottom).
    """
    if not patches:
        return np.zeros((0, 4), dtype=np.float64)
    return np.array([p.box() for p in patches], dtype=np.float64)


@beartype
def boxes_overlap(a: Box, b: Box, *, strict: bool = False) -> bool:
    """
    Edge-based overlap of two (left, top, right, bottom) boxes.

    strict=False treats the intervals as closed, so boxes that only touch overlap.
    strict=True requires an intersection with positive area.
    """
    a_left, a_top, a_right, a_bottom = a
    b_left, b_top, b_right, b_bottom = b
    if strict:
        x_overlap = a_left < b_right and a_right > b_left
        y_overlap = a_top < b_bottom and a_bottom > b_top
    else:
        x_overlap = a_left <= b_right and a_right >= b_left
        y_overlap = a_top <= b_bottom and a_bottom >= b_top
    return x_overlap and y_overlap


@jaxtyped(typechecker=beartype)
def overlap_mask(
    probe: Box, boxes: NpBoxes, *, strict: bool = False, tol: float | int = 0.0
) -> Bool[np.ndarray, "N"]:
    """
    Overlap of one probe box against every row of boxes.

    strict=False uses closed intervals. strict=True needs the shared span to
    exceed tol on both axes, so boxes that only touch the probe are skipped.
    """
    left, top, right, bottom = probe
    if not strict:
        return (
            (boxes[:, 0] <= right)
            & (boxes[:, 2] >= left)
            & (boxes[:, 1] <= bottom)
            & (boxes[:, 3] >= top)
        )
    return (
        (boxes[:, 0] < right - tol)
        & (boxes[:, 2] > left + tol)
        & (boxes[:, 1] < bottom - tol)
        & (boxes[:, 3] > top + tol)
    )


@beartype
def probe_above(patch: Patch, eps: float | int = 1.0) -> Box | None:
    """
    Region over the patch's columns from the canvas top to just above the patch.

    Returns None when the patch is within eps of the top: the probe would have
    no height and nothing can sit above the patch.
    """
    probe_bottom = patch.top - eps
    if probe_bottom <= 0.0:
        return None
    return (patch.left, 0.0, patch.right, probe_bottom)


@beartype
def overlapping_pairs(
    patches: Sequence[Patch], *, strict: bool = True
) -> list[tuple[int, int]]:
    """Id pairs whose boxes overlap, ordered by position in the input."""
    boxes = [p.box() for p in patches]
    pairs: list[tuple[int, int]] = []
    for i in range(len(boxes)):
        for j in range(i + 1, len(boxes)):
            if boxes_overlap(boxes[i], boxes[j], strict=strict):
                pairs.append((patches[i].id, patches[j].id))
    return pairs


@beartype
def layout_bounds(patches: Sequence[Patch]) -> Box | None:
    if not patches:
        return None
    boxes = patch_boxes(patches)
    return (
        float(boxes[:, 0].min()),
        float(boxes[:, 1].min()),
        float(boxes[:, 2].max()),
        float(boxes[:, 3].max()),
    )
