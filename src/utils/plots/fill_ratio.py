from __future__ import annotations

from pathlib import Path

import numpy as np


def plot_fill_ratio(
    out_path: Path,
    stages: list[str],
    fill_ratio: np.ndarray,
    overlap_pairs: np.ndarray,
) -> None:
    import matplotlib.pyplot as plt

    x = np.arange(len(stages))
    fig, ax = plt.subplots(figsize=(8.5, 5.0), dpi=120)
    ax.bar(x, fill_ratio, color="#2ca02c", label="fill_ratio")
    ax.set_xticks(x)
    ax.set_xticklabels(stages, rotation=15)
    ax.set_ylabel("covered area / bounds area")
    ax.set_ylim(0.0, 1.0)
    for xi, pairs in zip(x, overlap_pairs):
        if pairs > 0:
            ax.annotate(
                f"{int(pairs)} overlaps",
                (float(xi), 0.02),
                ha="center",
                fontsize=8,
                color="#d62728",
            )
    ax.grid(True, axis="y", alpha=0.3)
    ax.legend(loc="best")
    fig.tight_layout()
    fig.savefig(out_path, dpi=160)
