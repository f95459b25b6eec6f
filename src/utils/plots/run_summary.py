from __future__ import annotations

from pathlib import Path
from typing import Any


def summary_lines(
    metadata: dict[str, Any], rows: list[dict[str, str]]
) -> list[str]:
    lines = [f"{key}: {metadata[key]}" for key in sorted(metadata)]
    lines.append("")
    lines.append(f"{'stage':<18}{'count':>7}{'width':>10}{'height':>10}{'fill':>8}")
    for row in rows:
        lines.append(
            f"{row['stage']:<18}{int(row['count']):>7}"
            f"{float(row['bounds_width']):>10.1f}{float(row['bounds_height']):>10.1f}"
            f"{float(row['fill_ratio']):>8.3f}"
        )
    return lines


def plot_run_summary(out_path: Path, title: str, lines: list[str]) -> None:
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(8.5, 6.0), dpi=120)
    ax.axis("off")
    fig.suptitle(title, fontsize=12, y=0.98)
    ax.text(
        0.01,
        0.98,
        "\n".join(lines),
        va="top",
        ha="left",
        family="monospace",
        fontsize=8,
    )
    fig.tight_layout()
    fig.savefig(out_path, dpi=160)
