"""REST API views for radar information."""
from __future__ import annotations

from functools import lru_cache
from typing import Tuple

from django.conf import settings
from django.http import HttpResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.client.refresh import describe
from backend.core.health import HealthRegistry, utc_now_iso
from backend.core.services.radar_service import RadarService, build_radar_service
from backend.render.raster import render_png
from backend.render.renderer import INTENSITY_LEGEND, render


@lru_cache(maxsize=1)
def get_health_registry() -> HealthRegistry:
    return HealthRegistry()


@lru_cache(maxsize=1)
def get_radar_service() -> RadarService:
    return build_radar_service(
        settings.RADAR_CANDIDATE_URLS,
        timeout=settings.RADAR_PROBE_TIMEOUT,
        refresh_interval=settings.RADAR_REFRESH_INTERVAL,
        overall_deadline=settings.RADAR_OVERALL_DEADLINE,
        user_agent=settings.RADAR_USER_AGENT,
        health=get_health_registry(),
    )


def _surface_size(request) -> Tuple[int, int]:
    """Read ``width``/``height`` query parameters, falling back to the configured canvas."""
    sizes = []
    for name, default in (("width", settings.RADAR_CANVAS_WIDTH), ("height", settings.RADAR_CANVAS_HEIGHT)):
        raw = request.query_params.get(name)
        if raw is None:
            sizes.append(default)
            continue
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"{name} must be an integer") from None
        if not 0 < value <= settings.RADAR_MAX_CANVAS_SIZE:
            raise ValueError(f"{name} must be between 1 and {settings.RADAR_MAX_CANVAS_SIZE}")
        sizes.append(value)
    return sizes[0], sizes[1]


class IndexView(APIView):
    def get(self, request, *args, **kwargs):
        return Response({"message": settings.RADAR_SERVICE_NAME}, status=status.HTTP_200_OK)


class HealthView(APIView):
    """Liveness probe; reports uptime and what the probes have seen so far."""

    def get(self, request, *args, **kwargs):
        registry = get_health_registry()
        payload = {
            "service": settings.RADAR_SERVICE_NAME,
            "status": "ok",
            "message": "Server is running",
            "timestamp": utc_now_iso(),
            "uptime_seconds": round(registry.uptime(), 3),
            "probes": registry.snapshot(),
        }
        return Response(payload, status=status.HTTP_200_OK)


class RadarLatestView(APIView):
    """Return the radar record for the current cycle."""

    def get(self, request, *args, **kwargs):
        record = get_radar_service().get_latest()
        return Response(record.as_dict(), status=status.HTTP_200_OK)


class RadarFrameView(APIView):
    """Return the current record together with its serialized draw operations."""

    def get(self, request, *args, **kwargs):
        try:
            width, height = _surface_size(request)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        record = get_radar_service().get_latest()
        payload = {
            "record": record.as_dict(),
            "status_text": describe(record),
            "width": width,
            "height": height,
            "operations": [op.as_dict() for op in render(width, height, record)],
            "legend": [{"intensity": intensity.value, "label": label} for intensity, label in INTENSITY_LEGEND],
        }
        return Response(payload, status=status.HTTP_200_OK)


class RadarImageView(APIView):
    """Rasterize the current frame as a PNG."""

    def get(self, request, *args, **kwargs):
        try:
            width, height = _surface_size(request)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        record = get_radar_service().get_latest()
        response = HttpResponse(render_png(width, height, record), content_type="image/png")
        response["X-Radar-Status"] = record.status.value
        response["Cache-Control"] = "no-store"
        return response
