import numpy as np

from src.patchpack.geometry import (
    boxes_overlap,
    layout_bounds,
    overlap_mask,
    overlapping_pairs,
    patch_boxes,
    probe_above,
)
from src.patchpack.patch import Patch


def _patch(pid: int, left: float, top: float, w: float, h: float) -> Patch:
    return Patch(pid, (left + w / 2.0, top + h / 2.0), (w, h))


def test_patch_boxes_rows_and_empty() -> None:
    boxes = patch_boxes([_patch(0, 1.0, 2.0, 3.0, 4.0)])
    np.testing.assert_allclose(boxes, np.array([[1.0, 2.0, 4.0, 6.0]]))
    empty = patch_boxes([])
    assert empty.shape == (0, 4)


def test_boxes_overlap_edge_based() -> None:
    a = (0.0, 0.0, 10.0, 10.0)
    assert boxes_overlap(a, (5.0, 5.0, 15.0, 15.0))
    assert not boxes_overlap(a, (11.0, 0.0, 20.0, 10.0))
    assert not boxes_overlap(a, (0.0, 11.0, 10.0, 20.0))
    # overlapping in x only
    assert not boxes_overlap(a, (2.0, 30.0, 8.0, 40.0))


def test_boxes_overlap_touching_depends_on_strict() -> None:
    a = (0.0, 0.0, 10.0, 10.0)
    touching = (10.0, 0.0, 20.0, 10.0)
    assert boxes_overlap(a, touching)
    assert not boxes_overlap(a, touching, strict=True)


def test_boxes_overlap_is_not_shifted_by_extent() -> None:
    # Small box well inside a large one, far from the large box's center.
    big = (0.0, 0.0, 100.0, 100.0)
    small = (90.0, 90.0, 95.0, 95.0)
    assert boxes_overlap(big, small, strict=True)
    assert boxes_overlap(small, big, strict=True)


def test_overlap_mask_matches_pairwise_test() -> None:
    rng = np.random.default_rng(3)
    lt = rng.uniform(0.0, 50.0, size=(40, 2))
    wh = rng.uniform(1.0, 20.0, size=(40, 2))
    boxes = np.concatenate([lt, lt + wh], axis=1)
    probe = (10.0, 0.0, 30.0, 25.0)
    mask = overlap_mask(probe, boxes)
    expected = [boxes_overlap(probe, tuple(float(v) for v in row)) for row in boxes]
    assert mask.tolist() == expected


def test_overlap_mask_strict_skips_touching_boxes() -> None:
    probe = (10.0, 0.0, 20.0, 30.0)
    boxes = np.array(
        [
            [20.0, 0.0, 30.0, 10.0],  # shares the probe's right edge
            [0.0, 5.0, 10.0, 15.0],  # shares the probe's left edge
            [19.0, 5.0, 25.0, 15.0],  # reaches one unit into the probe
            [12.0, 30.0, 18.0, 40.0],  # sits on the probe's bottom edge
            [20.0 - 1e-12, 0.0, 30.0, 10.0],  # rounding-level contact
        ]
    )
    assert overlap_mask(probe, boxes).tolist() == [True] * 5
    assert overlap_mask(probe, boxes, strict=True, tol=1e-9).tolist() == [
        False,
        False,
        True,
        False,
        False,
    ]


def test_probe_above_spans_columns_to_canvas_top() -> None:
    p = _patch(0, 10.0, 50.0, 20.0, 5.0)
    assert probe_above(p) == (10.0, 0.0, 30.0, 49.0)


def test_probe_above_flush_with_top_is_empty() -> None:
    assert probe_above(_patch(0, 10.0, 0.0, 20.0, 5.0)) is None
    assert probe_above(_patch(0, 10.0, 1.0, 20.0, 5.0)) is None
    assert probe_above(_patch(0, 10.0, 0.5, 20.0, 5.0), eps=0.25) is not None


def test_overlapping_pairs_and_bounds() -> None:
    patches = [
        _patch(0, 0.0, 0.0, 10.0, 10.0),
        _patch(1, 5.0, 5.0, 10.0, 10.0),
        _patch(2, 10.0, 0.0, 5.0, 6.0),
        _patch(3, 40.0, 40.0, 5.0, 5.0),
    ]
    assert overlapping_pairs(patches) == [(0, 1), (1, 2)]
    assert overlapping_pairs(patches, strict=False) == [(0, 1), (0, 2), (1, 2)]
    assert layout_bounds(patches) == (0.0, 0.0, 45.0, 45.0)
    assert layout_bounds([]) is None
