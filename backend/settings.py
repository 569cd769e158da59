"""Base Django settings for the radar service."""
from __future__ import annotations

from pathlib import Path
import os
from typing import Optional

from django.core.exceptions import ImproperlyConfigured

from backend.core.providers.mrms import DEFAULT_CANDIDATE_URLS, parse_candidate_list

BASE_DIR = Path(__file__).resolve().parent.parent


def env(name: str, default: str | None = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    value = os.environ.get(name, default)
    if value is None:
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


def env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ImproperlyConfigured(f"Environment variable {name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ImproperlyConfigured(f"Environment variable {name} must be positive")
    return value


DEBUG = os.environ.get("DJANGO_DEBUG", "0") == "1"
TESTING_MODE = os.environ.get("TESTING_MODE", "0") == "1"
SECRET_KEY = env("DJANGO_SECRET_KEY", "dev-only-secret" if DEBUG or TESTING_MODE else None)
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "backend.api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "backend.urls"

WSGI_APPLICATION = "backend.wsgi.application"

# Nothing is persisted.
DATABASES: dict = {}

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

PORT = int(env_float("PORT", 5000))

RADAR_SERVICE_NAME = os.environ.get("RADAR_SERVICE_NAME", "MRMS Radar API")
RADAR_CANDIDATE_URLS = parse_candidate_list(os.environ.get("RADAR_CANDIDATE_URLS", "")) or list(DEFAULT_CANDIDATE_URLS)
RADAR_PROBE_TIMEOUT = env_float("RADAR_PROBE_TIMEOUT", 5.0)
RADAR_OVERALL_DEADLINE = env_float("RADAR_OVERALL_DEADLINE", None)
RADAR_REFRESH_INTERVAL = env_float("RADAR_REFRESH_INTERVAL", 120.0)
RADAR_CANVAS_WIDTH = int(env_float("RADAR_CANVAS_WIDTH", 1000))
RADAR_CANVAS_HEIGHT = int(env_float("RADAR_CANVAS_HEIGHT", 700))
RADAR_MAX_CANVAS_SIZE = 4096
RADAR_USER_AGENT = os.environ.get("RADAR_USER_AGENT", "mrms-radar-probe/1.0")
RADAR_LOG_LEVEL = os.environ.get("RADAR_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "default"},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "backend": {"handlers": ["console"], "level": RADAR_LOG_LEVEL, "propagate": False},
        "Resolver": {"handlers": ["console"], "level": RADAR_LOG_LEVEL, "propagate": False},
        "HttpProbe": {"handlers": ["console"], "level": RADAR_LOG_LEVEL, "propagate": False},
    },
}
