"""Root URL configuration."""
from __future__ import annotations

from django.urls import include, path

from backend.api.views import IndexView

urlpatterns = [
    path("", IndexView.as_view(), name="index"),
    path("api/", include("backend.api.urls")),
]
