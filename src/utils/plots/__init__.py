from .bounds import plot_bounds
from .fill_ratio import plot_fill_ratio
from .run_summary import plot_run_summary

__all__ = [
    "plot_bounds",
    "plot_fill_ratio",
    "plot_run_summary",
]
