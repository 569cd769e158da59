"""Turn a radar record into an ordered list of draw operations.

The output depends only on the surface size and the record, so two calls with
the same arguments always produce equal lists.  Every position is expressed as
a fraction of the surface and scaled at render time; radii and marker sizes
are fixed pixels.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from backend.core.abstractions import CONUS_BOUNDS, GeoBounds, RadarRecord
from backend.render.operations import (
    ClipRect,
    DrawOperation,
    FillCircle,
    FillPolygon,
    FillRect,
    Intensity,
    PrecipitationArea,
    RadialGradientCircle,
    Rgba,
    StrokeLine,
    Text,
)


BACKGROUND = Rgba.from_hex("#1e3a8a")
LANDMASS_FILL = Rgba.from_hex("#1e293b")
LANDMASS_STROKE = Rgba.from_hex("#475569")
LANDMASS_OUTLINE: Tuple[Tuple[float, float], ...] = ((0.15, 0.15), (0.85, 0.15), (0.75, 0.85), (0.25, 0.85))
GRID_STROKE = Rgba(255, 255, 255, 0.1)
GRID_COLUMNS = 8
GRID_ROWS = 6

LABEL_FILL = Rgba.from_hex("#94a3b8")
MARKER_RADIUS = 3
LABEL_OFFSET = 8
REFERENCE_POINTS: Tuple[Tuple[str, float, float], ...] = (
    ("Seattle", 0.2, 0.25),
    ("Chicago", 0.5, 0.4),
    ("NYC", 0.8, 0.35),
    ("Miami", 0.7, 0.8),
    ("LA", 0.1, 0.6),
    ("Denver", 0.35, 0.5),
)

# inner colour at the centre, outer colour at the rim
INTENSITY_COLORS: Dict[Intensity, Tuple[Rgba, Rgba]] = {
    Intensity.LIGHT: (Rgba(34, 197, 94, 0.4), Rgba(34, 197, 94, 0.1)),
    Intensity.MODERATE: (Rgba(234, 179, 8, 0.5), Rgba(234, 179, 8, 0.15)),
    Intensity.HEAVY: (Rgba(249, 115, 22, 0.6), Rgba(249, 115, 22, 0.2)),
    Intensity.SEVERE: (Rgba(239, 68, 68, 0.7), Rgba(239, 68, 68, 0.25)),
}

INTENSITY_LEGEND: Tuple[Tuple[Intensity, str], ...] = (
    (Intensity.LIGHT, "Light (0-20 dBZ)"),
    (Intensity.MODERATE, "Moderate (20-40 dBZ)"),
    (Intensity.HEAVY, "Heavy (40-55 dBZ)"),
    (Intensity.SEVERE, "Severe (55+ dBZ)"),
)

# (x fraction, y fraction, radius in px, intensity)
SAMPLE_LAYOUT: Tuple[Tuple[float, float, float, Intensity], ...] = (
    (0.2, 0.25, 60, Intensity.LIGHT),
    (0.5, 0.4, 80, Intensity.MODERATE),
    (0.7, 0.6, 100, Intensity.HEAVY),
    (0.75, 0.8, 70, Intensity.SEVERE),
)


def _check_surface(width: float, height: float) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"surface must have a positive size, got {width}x{height}")


def render_base_map(width: float, height: float) -> List[DrawOperation]:
    _check_surface(width, height)
    operations: List[DrawOperation] = [FillRect(0, 0, width, height, BACKGROUND)]
    operations.append(
        FillPolygon(
            points=tuple((width * fx, height * fy) for fx, fy in LANDMASS_OUTLINE),
            fill=LANDMASS_FILL,
            stroke=LANDMASS_STROKE,
            line_width=2,
        )
    )
    for column in range(GRID_COLUMNS + 1):
        x = width * column / GRID_COLUMNS
        operations.append(StrokeLine((x, 0), (x, height), GRID_STROKE, 1))
    for row in range(GRID_ROWS + 1):
        y = height * row / GRID_ROWS
        operations.append(StrokeLine((0, y), (width, y), GRID_STROKE, 1))
    for name, fx, fy in REFERENCE_POINTS:
        x, y = width * fx, height * fy
        operations.append(FillCircle((x, y), MARKER_RADIUS, LABEL_FILL))
        operations.append(Text((x, y - LABEL_OFFSET), name, LABEL_FILL))
    return operations


def sample_precipitation(width: float, height: float) -> List[PrecipitationArea]:
    """Fixed demonstration layout; positions scale with the surface, radii are pixels."""
    return [
        PrecipitationArea(center=(width * fx, height * fy), radius=radius, intensity=intensity)
        for fx, fy, radius, intensity in SAMPLE_LAYOUT
    ]


def overlay_clip(width: float, height: float, bounds: GeoBounds, viewport: GeoBounds = CONUS_BOUNDS) -> ClipRect:
    left, top = viewport.project(bounds.north, bounds.west, width, height)
    right, bottom = viewport.project(bounds.south, bounds.east, width, height)
    left, right = max(0.0, left), min(float(width), right)
    top, bottom = max(0.0, top), min(float(height), bottom)
    return ClipRect(left, top, max(0.0, right - left), max(0.0, bottom - top))


def render_overlay(
    width: float,
    height: float,
    record: RadarRecord,
    viewport: GeoBounds = CONUS_BOUNDS,
) -> List[DrawOperation]:
    # Live feeds are not decoded, so the overlay is the same for every status.
    if record.bounds is None:
        raise ValueError("cannot render a record without bounds")
    _check_surface(width, height)
    operations: List[DrawOperation] = [overlay_clip(width, height, record.bounds, viewport)]
    for area in sample_precipitation(width, height):
        inner, outer = INTENSITY_COLORS.get(area.intensity, INTENSITY_COLORS[Intensity.LIGHT])
        operations.append(RadialGradientCircle(area=area, inner=inner, outer=outer))
    return operations


def render(
    width: float,
    height: float,
    record: RadarRecord,
    viewport: GeoBounds = CONUS_BOUNDS,
) -> List[DrawOperation]:
    """Base map first, then the precipitation overlay bounded by ``record.bounds``."""
    if record.bounds is None:
        raise ValueError("cannot render a record without bounds")
    return render_base_map(width, height) + render_overlay(width, height, record, viewport)


__all__ = [
    "INTENSITY_COLORS",
    "INTENSITY_LEGEND",
    "REFERENCE_POINTS",
    "SAMPLE_LAYOUT",
    "overlay_clip",
    "render",
    "render_base_map",
    "render_overlay",
    "sample_precipitation",
]
