from __future__ import annotations

import svgwrite  # type: ignore[reportMissingTypeStubs]
from beartype import beartype
from beartype.typing import Sequence

from .geometry import layout_bounds
from .patch import Patch


@beartype
def layout_viewbox(
    patches: Sequence[Patch],
    canvas_size: tuple[float, float],
    pad: float | int = 10.0,
) -> tuple[float, float, float, float]:
    """
    Canvas area, grown to cover any patch outside it (packed layouts may run
    below the canvas).
    """
    minx, miny = 0.0, 0.0
    maxx, maxy = canvas_size
    bounds = layout_bounds(patches)
    if bounds is not None:
        minx = min(minx, bounds[0])
        miny = min(miny, bounds[1])
        maxx = max(maxx, bounds[2])
        maxy = max(maxy, bounds[3])
    return (
        float(minx - pad),
        float(miny - pad),
        float((maxx - minx) + 2 * pad),
        float((maxy - miny) + 2 * pad),
    )


@beartype
def export_patches_svg(
    out_path: str,
    patches: Sequence[Patch],
    canvas_size: tuple[float, float],
    *,
    label: str | None = None,
    fill: str = "#3c3c3c",
    fill_opacity: float = 0.5,
    stroke: str = "#111111",
    stroke_width: float | str = 1.0,
    canvas_stroke: str = "#777777",
    canvas_dasharray: str | None = "4,4",
    font_size: float = 16.0,
    viewbox: tuple[float, float, float, float] | None = None,
) -> None:
    """
    One rectangle per patch with its id at the center, the canvas outline for
    context and an optional stage label in the bottom-left corner.
    """
    if viewbox is None:
        viewbox = layout_viewbox(patches, canvas_size)

    dwg = svgwrite.Drawing(out_path, profile="tiny", size=(viewbox[2], viewbox[3]))
    dwg.attribs["viewBox"] = f"{viewbox[0]} {viewbox[1]} {viewbox[2]} {viewbox[3]}"

    canvas_kwargs: dict[str, object] = {
        "stroke": canvas_stroke,
        "fill": "none",
        "stroke_width": 1.0,
    }
    if canvas_dasharray is not None:
        canvas_kwargs["stroke_dasharray"] = canvas_dasharray
    dwg.add(dwg.rect(insert=(0, 0), size=canvas_size, **canvas_kwargs))

    g = dwg.g(id="patches")
    for patch in patches:
        g.add(
            dwg.rect(
                insert=(patch.left, patch.top),
                size=(patch.width, patch.height),
                fill=fill,
                fill_opacity=fill_opacity,
                stroke=stroke,
                stroke_width=stroke_width,
            )
        )
        g.add(
            dwg.text(
                str(patch.id),
                insert=(patch.center[0], patch.center[1]),
                font_size=font_size,
                fill="#ffffff",
                text_anchor="middle",
            )
        )
    dwg.add(g)

    if label is not None:
        dwg.add(
            dwg.text(
                label,
                insert=(viewbox[0] + 20.0, viewbox[1] + viewbox[3] - 20.0),
                font_size=2 * font_size,
                fill="#505050",
            )
        )
    dwg.save()
