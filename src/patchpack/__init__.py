from . import animate, export_svg, geometry, metrics, patch, pipeline, stages

__all__ = [
    "patch",
    "geometry",
    "stages",
    "pipeline",
    "animate",
    "metrics",
    "export_svg",
]
