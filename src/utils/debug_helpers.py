from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from . import debug

if TYPE_CHECKING:
    from ..patchpack.patch import Patch

_seen: set[str] = set()


def log_once(key: str, message: str) -> None:
    if debug.is_verbose() and key not in _seen:
        _seen.add(key)
        debug.log(message)


def log_patches(name: str, patches: Sequence[Patch]) -> None:
    if not debug.is_verbose():
        return
    if not patches:
        debug.log(f"{name}: count=0")
        return
    left = min(p.left for p in patches)
    top = min(p.top for p in patches)
    right = max(p.right for p in patches)
    bottom = max(p.bottom for p in patches)
    min_side = min(min(p.extent) for p in patches)
    max_side = max(max(p.extent) for p in patches)
    rotated = sum(1 for p in patches if p.rotation != 0.0)
    debug.log(
        f"{name}: count={len(patches)} "
        f"bounds=({left:.6g},{top:.6g})-({right:.6g},{bottom:.6g}) "
        f"side_min={min_side:.6g} side_max={max_side:.6g} rotated={rotated}"
    )
