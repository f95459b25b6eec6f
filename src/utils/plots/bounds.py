from __future__ import annotations

from pathlib import Path

import numpy as np


def plot_bounds(
    out_path: Path,
    stages: list[str],
    bounds_width: np.ndarray,
    bounds_height: np.ndarray,
    canvas_size: tuple[float, float] | None = None,
) -> None:
    import matplotlib.pyplot as plt

    x = np.arange(len(stages))
    fig, ax = plt.subplots(figsize=(8.5, 5.0), dpi=120)
    ax.plot(x, bounds_width, marker="o", label="bounds_width", color="#1f77b4")
    ax.plot(x, bounds_height, marker="o", label="bounds_height", color="#ff7f0e")
    if canvas_size is not None:
        ax.axhline(canvas_size[0], color="#1f77b4", linestyle="--", alpha=0.5)
        ax.axhline(canvas_size[1], color="#ff7f0e", linestyle="--", alpha=0.5)
    ax.set_xticks(x)
    ax.set_xticklabels(stages, rotation=15)
    ax.set_ylabel("units")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    fig.tight_layout()
    fig.savefig(out_path, dpi=160)
