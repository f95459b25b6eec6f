from __future__ import annotations

from beartype import beartype
from beartype.typing import Sequence

from .patch import Patch, patches_by_id


@beartype
def ease_in_out_cubic(t: float | int) -> float:
    t = min(max(t, 0.0), 1.0) * 2.0
    if t < 1.0:
        return 0.5 * t * t * t
    t -= 2.0
    return 0.5 * (t * t * t + 2.0)


@beartype
def interpolate_layouts(
    old: Sequence[Patch],
    new: Sequence[Patch],
    t: float | int,
) -> list[Patch]:
    """
    Blend two layouts of the same patches, matched by id.
    t is eased and clamped to [0,1]; the result follows the order of new.
    """
    old_by_id = patches_by_id(old)
    new_by_id = patches_by_id(new)
    if old_by_id.keys() != new_by_id.keys():
        missing = sorted(old_by_id.keys() ^ new_by_id.keys())
        raise ValueError(f"layouts hold different patch ids: {missing}")

    s = ease_in_out_cubic(t)
    blended: list[Patch] = []
    for current in new:
        prev = old_by_id[current.id]
        center = (
            prev.center[0] + s * (current.center[0] - prev.center[0]),
            prev.center[1] + s * (current.center[1] - prev.center[1]),
        )
        extent = (
            prev.extent[0] + s * (current.extent[0] - prev.extent[0]),
            prev.extent[1] + s * (current.extent[1] - prev.extent[1]),
        )
        rotation = prev.rotation + s * (current.rotation - prev.rotation)
        blended.append(Patch(current.id, center, extent, rotation))
    return blended
