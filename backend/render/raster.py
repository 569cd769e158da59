"""Replay draw operations onto a Pillow image."""
from __future__ import annotations

import io
import math
from typing import Callable, Dict, Iterable, Optional, Tuple, Type

from PIL import Image, ImageDraw, ImageFont

from backend.core.abstractions import RadarRecord
from backend.render.operations import (
    ClipRect,
    DrawOperation,
    FillCircle,
    FillPolygon,
    FillRect,
    RadialGradientCircle,
    Rgba,
    StrokeLine,
    Text,
)
from backend.render.renderer import render

Box = Tuple[int, int, int, int]


def _paint_rect(draw: ImageDraw.ImageDraw, op: FillRect) -> None:
    draw.rectangle([op.x, op.y, op.x + op.width, op.y + op.height], fill=op.fill.as_tuple())


def _paint_polygon(draw: ImageDraw.ImageDraw, op: FillPolygon) -> None:
    outline = op.stroke.as_tuple() if op.stroke is not None and op.line_width > 0 else None
    draw.polygon(list(op.points), fill=op.fill.as_tuple(), outline=outline, width=max(1, int(round(op.line_width))))


def _paint_line(draw: ImageDraw.ImageDraw, op: StrokeLine) -> None:
    draw.line([op.start, op.end], fill=op.stroke.as_tuple(), width=max(1, int(round(op.line_width))))


def _paint_circle(draw: ImageDraw.ImageDraw, op: FillCircle) -> None:
    x, y = op.center
    draw.ellipse([x - op.radius, y - op.radius, x + op.radius, y + op.radius], fill=op.fill.as_tuple())


def _paint_text(draw: ImageDraw.ImageDraw, op: Text) -> None:
    font = ImageFont.load_default()
    left, top, right, bottom = draw.textbbox((0, 0), op.text, font=font)
    x, y = op.position
    if op.align == "center":
        x -= (right - left) / 2
    elif op.align == "right":
        x -= right - left
    # canvas text sits on its baseline, Pillow draws from the top
    draw.text((x, y - (bottom - top)), op.text, fill=op.fill.as_tuple(), font=font)


def _mix(inner: Rgba, outer: Rgba, t: float) -> Tuple[int, int, int, int]:
    start, end = inner.as_tuple(), outer.as_tuple()
    return tuple(int(round(a + (b - a) * t)) for a, b in zip(start, end))  # type: ignore[return-value]


def _paint_gradient(draw: ImageDraw.ImageDraw, op: RadialGradientCircle) -> None:
    x, y = op.area.center
    steps = max(1, int(math.ceil(op.area.radius)))
    # outermost ring first, each smaller disc overwrites the previous one
    for step in range(steps, 0, -1):
        radius = op.area.radius * step / steps
        colour = _mix(op.inner, op.outer, step / steps)
        draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=colour)


_PAINTERS: Dict[Type[DrawOperation], Callable] = {
    FillRect: _paint_rect,
    FillPolygon: _paint_polygon,
    StrokeLine: _paint_line,
    FillCircle: _paint_circle,
    Text: _paint_text,
    RadialGradientCircle: _paint_gradient,
}


def _clip_box(op: ClipRect) -> Box:
    return (
        int(math.floor(op.x)),
        int(math.floor(op.y)),
        int(math.ceil(op.x + op.width)),
        int(math.ceil(op.y + op.height)),
    )


def rasterize(operations: Iterable[DrawOperation], width: int, height: int) -> Image.Image:
    """Composite every operation, in order, onto a transparent RGBA image."""
    size = (int(round(width)), int(round(height)))
    canvas = Image.new("RGBA", size, (0, 0, 0, 0))
    clip: Optional[Box] = None
    for op in operations:
        if isinstance(op, ClipRect):
            clip = _clip_box(op)
            continue
        painter = _PAINTERS.get(type(op))
        if painter is None:
            raise TypeError(f"no painter for {type(op).__name__}")
        layer = Image.new("RGBA", size, (0, 0, 0, 0))
        painter(ImageDraw.Draw(layer), op)
        if clip is not None:
            clipped = Image.new("RGBA", size, (0, 0, 0, 0))
            clipped.paste(layer.crop(clip), clip[:2])
            layer = clipped
        canvas = Image.alpha_composite(canvas, layer)
    return canvas


def to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def render_png(width: int, height: int, record: RadarRecord) -> bytes:
    return to_png_bytes(rasterize(render(width, height, record), width, height))


__all__ = ["rasterize", "render_png", "to_png_bytes"]
