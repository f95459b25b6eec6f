from __future__ import annotations

from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont
from tqdm import tqdm  # type: ignore[reportMissingModuleSource]

from ..patchpack.animate import interpolate_layouts
from ..patchpack.export_svg import layout_viewbox
from ..patchpack.patch import Patch
from ..patchpack.pipeline import PackingState

DEFAULT_BG = (255, 255, 255)
DEFAULT_FILL = (60, 60, 60, 128)
DEFAULT_OUTLINE = (17, 17, 17)
FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont
ViewBox = tuple[float, float, float, float]


def _load_font(font_path: str | None, size: int) -> FontType:
    if font_path is not None:
        return ImageFont.truetype(font_path, size=size)
    candidates = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    ]
    for candidate in candidates:
        if Path(candidate).exists():
            return ImageFont.truetype(candidate, size=size)
    return ImageFont.load_default()


def _text_size(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: FontType,
) -> tuple[int, int]:
    try:
        bbox = draw.textbbox((0, 0), text, font=font)
        return int(bbox[2] - bbox[0]), int(bbox[3] - bbox[1])
    except AttributeError:
        mask = font.getmask(text)
        return int(mask.size[0]), int(mask.size[1])


def _draw_text_outline(
    draw: ImageDraw.ImageDraw,
    position: tuple[int, int],
    text: str,
    font: FontType,
    fill: tuple[int, int, int],
    outline: tuple[int, int, int],
    outline_width: int = 2,
) -> None:
    x, y = position
    for dx in range(-outline_width, outline_width + 1):
        for dy in range(-outline_width, outline_width + 1):
            if dx == 0 and dy == 0:
                continue
            draw.text((x + dx, y + dy), text, font=font, fill=outline)
    draw.text(position, text, font=font, fill=fill)


def union_viewbox(states: Sequence[PackingState]) -> ViewBox:
    """One viewBox covering every stage, so frames share a coordinate frame."""
    if not states:
        raise ValueError("need at least one state")
    canvas = (states[0].config.width, states[0].config.height)
    boxes = [layout_viewbox(s.patches, canvas) for s in states]
    minx = min(b[0] for b in boxes)
    miny = min(b[1] for b in boxes)
    maxx = max(b[0] + b[2] for b in boxes)
    maxy = max(b[1] + b[3] for b in boxes)
    return (minx, miny, maxx - minx, maxy - miny)


def render_layout_frame(
    patches: Sequence[Patch],
    viewbox: ViewBox,
    scale: float,
    label: str | None,
    font: FontType,
    id_font: FontType,
) -> Image.Image:
    minx, miny, width, height = viewbox
    out_size = (max(1, int(round(width * scale))), max(1, int(round(height * scale))))
    image = Image.new("RGBA", out_size, color=DEFAULT_BG + (255,))
    overlay = Image.new("RGBA", out_size, color=(0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    def to_px(x: float, y: float) -> tuple[int, int]:
        return (int(round((x - minx) * scale)), int(round((y - miny) * scale)))

    for patch in patches:
        x0, y0 = to_px(patch.left, patch.top)
        x1, y1 = to_px(patch.right, patch.bottom)
        draw.rectangle((x0, y0, max(x0, x1 - 1), max(y0, y1 - 1)), fill=DEFAULT_FILL)
    image = Image.alpha_composite(image, overlay)

    draw = ImageDraw.Draw(image)
    for patch in patches:
        x0, y0 = to_px(patch.left, patch.top)
        x1, y1 = to_px(patch.right, patch.bottom)
        draw.rectangle(
            (x0, y0, max(x0, x1 - 1), max(y0, y1 - 1)), outline=DEFAULT_OUTLINE
        )
        cx, cy = to_px(patch.center[0], patch.center[1])
        draw.text((cx, cy), str(patch.id), font=id_font, fill=(255, 255, 255))

    if label is not None:
        padding = max(6, int(round(min(out_size) * 0.02)))
        _text_w, text_h = _text_size(draw, label, font)
        _draw_text_outline(
            draw,
            (padding, max(0, out_size[1] - padding - text_h)),
            label,
            font,
            fill=(80, 80, 80),
            outline=(255, 255, 255),
        )
    return image.convert("RGB")


def render_transition_frames(
    states: Sequence[PackingState],
    *,
    max_size: int = 480,
    frames_per_transition: int = 12,
    hold_frames: int = 6,
    font_path: str | None = None,
) -> list[Image.Image]:
    """
    Frames for the whole pipeline: each stage is held for hold_frames, and
    consecutive stages are joined by an eased transition matched on patch id.
    """
    if max_size <= 0:
        raise ValueError("max_size must be > 0")
    if frames_per_transition < 0 or hold_frames < 0:
        raise ValueError("frame counts must be >= 0")

    viewbox = union_viewbox(states)
    scale = float(max_size) / float(max(viewbox[2], viewbox[3]))
    short_side = min(viewbox[2], viewbox[3]) * scale
    font = _load_font(font_path, max(12, int(round(short_side * 0.04))))
    id_font = _load_font(font_path, max(8, int(round(short_side * 0.02))))

    frames: list[Image.Image] = []
    previous: PackingState | None = None
    for state in tqdm(states, desc="Rendering stages", unit="stage"):
        if previous is not None:
            for i in range(1, frames_per_transition + 1):
                t = i / float(frames_per_transition)
                blended = interpolate_layouts(previous.patches, state.patches, t)
                frames.append(
                    render_layout_frame(
                        blended, viewbox, scale, state.stage_name(), font, id_font
                    )
                )
        still = render_layout_frame(
            state.patches, viewbox, scale, state.stage_name(), font, id_font
        )
        frames.extend([still] * max(1, hold_frames))
        previous = state
    return frames


def save_gif(frames: Sequence[Image.Image], out_path: Path, fps: float = 12.0) -> None:
    if not frames:
        raise ValueError("no frames to save")
    if fps <= 0:
        raise ValueError("fps must be > 0")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    duration_ms = int(round(1000.0 / fps))
    frames[0].save(
        out_path,
        save_all=True,
        append_images=list(frames[1:]),
        duration=duration_ms,
        loop=0,
        disposal=2,
    )
    print(f"Saved GIF with {len(frames)} frames to {out_path}")
