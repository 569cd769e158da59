"""Declarative draw operations produced by the renderer.

The renderer never touches a drawing surface.  It returns a list of these
operations and lets the presentation layer replay them against whatever
surface it has (a Pillow image, a browser canvas via JSON, ...).
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

Point = Tuple[float, float]


@dataclass(frozen=True)
class Rgba:
    r: int
    g: int
    b: int
    a: float = 1.0

    @classmethod
    def from_hex(cls, value: str, alpha: float = 1.0) -> "Rgba":
        value = value.lstrip("#")
        if len(value) != 6:
            raise ValueError(f"expected #rrggbb, got {value!r}")
        return cls(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16), alpha)

    def with_alpha(self, alpha: float) -> "Rgba":
        return Rgba(self.r, self.g, self.b, alpha)

    def css(self) -> str:
        if self.a >= 1.0:
            return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return f"rgba({self.r}, {self.g}, {self.b}, {self.a:g})"

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.r, self.g, self.b, int(round(self.a * 255))


class Intensity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"
    SEVERE = "severe"


@dataclass(frozen=True)
class PrecipitationArea:
    center: Point
    radius: float
    intensity: Intensity


def _jsonable(value: Any) -> Any:
    if isinstance(value, Rgba):
        return value.css()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, PrecipitationArea):
        return {"center": list(value.center), "radius": value.radius, "intensity": value.intensity.value}
    if isinstance(value, tuple):
        return [_jsonable(item) for item in value]
    return value


class DrawOperation:
    kind: ClassVar[str] = "operation"

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"kind": self.kind}
        for field in fields(self):
            payload[field.name] = _jsonable(getattr(self, field.name))
        return payload


@dataclass(frozen=True)
class FillRect(DrawOperation):
    kind: ClassVar[str] = "fill_rect"

    x: float
    y: float
    width: float
    height: float
    fill: Rgba


@dataclass(frozen=True)
class FillPolygon(DrawOperation):
    kind: ClassVar[str] = "fill_polygon"

    points: Tuple[Point, ...]
    fill: Rgba
    stroke: Optional[Rgba] = None
    line_width: float = 0.0


@dataclass(frozen=True)
class StrokeLine(DrawOperation):
    kind: ClassVar[str] = "stroke_line"

    start: Point
    end: Point
    stroke: Rgba
    line_width: float = 1.0


@dataclass(frozen=True)
class FillCircle(DrawOperation):
    kind: ClassVar[str] = "fill_circle"

    center: Point
    radius: float
    fill: Rgba


@dataclass(frozen=True)
class Text(DrawOperation):
    kind: ClassVar[str] = "text"

    position: Point
    text: str
    fill: Rgba
    font: str = "12px Arial"
    align: str = "center"


@dataclass(frozen=True)
class ClipRect(DrawOperation):
    """Restricts every following operation to the given rectangle."""

    kind: ClassVar[str] = "clip_rect"

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class RadialGradientCircle(DrawOperation):
    kind: ClassVar[str] = "radial_gradient"

    area: PrecipitationArea
    inner: Rgba
    outer: Rgba


__all__ = [
    "ClipRect",
    "DrawOperation",
    "FillCircle",
    "FillPolygon",
    "FillRect",
    "Intensity",
    "Point",
    "PrecipitationArea",
    "RadialGradientCircle",
    "Rgba",
    "StrokeLine",
    "Text",
]
