from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Sequence

from shapely.geometry import box
from shapely.ops import unary_union

from .geometry import layout_bounds, overlapping_pairs
from .patch import Patch

METRICS_CSV_FIELDS = [
    "stage_index",
    "stage",
    "count",
    "bounds_width",
    "bounds_height",
    "patch_area",
    "covered_area",
    "fill_ratio",
    "overlap_pairs",
]


@dataclass(frozen=True)
class LayoutMetrics:
    count: int
    bounds_width: float
    bounds_height: float
    patch_area: float
    covered_area: float
    fill_ratio: float
    overlap_pairs: int


def layout_metrics(patches: Sequence[Patch]) -> LayoutMetrics:
    """
    Size and density of a layout. covered_area counts overlapping regions
    once, so it equals patch_area only for a layout without overlaps.
    """
    bounds = layout_bounds(patches)
    if bounds is None:
        return LayoutMetrics(0, 0.0, 0.0, 0.0, 0.0, 0.0, 0)
    left, top, right, bottom = bounds
    bounds_width = right - left
    bounds_height = bottom - top
    patch_area = float(sum(p.width * p.height for p in patches))
    covered = unary_union([box(*p.box()) for p in patches])
    covered_area = float(covered.area)
    return LayoutMetrics(
        count=len(patches),
        bounds_width=bounds_width,
        bounds_height=bounds_height,
        patch_area=patch_area,
        covered_area=covered_area,
        fill_ratio=covered_area / (bounds_width * bounds_height),
        overlap_pairs=len(overlapping_pairs(patches, strict=True)),
    )


def metrics_row(
    stage_index: int, stage_name: str, metrics: LayoutMetrics
) -> dict[str, Any]:
    row: dict[str, Any] = {"stage_index": stage_index, "stage": stage_name}
    row.update(asdict(metrics))
    return row
