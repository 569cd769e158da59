"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import HealthView, RadarFrameView, RadarImageView, RadarLatestView

urlpatterns = [
    path("health", HealthView.as_view(), name="health"),
    path("radar/latest", RadarLatestView.as_view(), name="radar-latest"),
    path("radar/frame", RadarFrameView.as_view(), name="radar-frame"),
    path("radar/image.png", RadarImageView.as_view(), name="radar-image"),
]
