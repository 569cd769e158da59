"""Run the refresh loop in the terminal, printing one status line per cycle."""
from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Optional

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from backend.api import views
from backend.client.refresh import Frame, RefreshController
from backend.client.remote import RemoteRadarService
from backend.render.raster import rasterize


class Command(BaseCommand):
    help = "Poll for radar data on an interval and report every refresh"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
        parser.add_argument("--interval", type=float, default=None, help="Seconds between cycles")
        parser.add_argument("--backend", type=str, help="Base URL of a running radar API to poll instead of probing")
        parser.add_argument("--output", type=str, help="Write each rendered frame to this PNG file")
        parser.add_argument("--width", type=int, default=None)
        parser.add_argument("--height", type=int, default=None)

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        interval = options["interval"]
        if interval is None:
            interval = settings.RADAR_REFRESH_INTERVAL
        width = settings.RADAR_CANVAS_WIDTH if options["width"] is None else options["width"]
        height = settings.RADAR_CANVAS_HEIGHT if options["height"] is None else options["height"]
        if interval <= 0 or width <= 0 or height <= 0:
            raise CommandError("--interval, --width and --height must be positive")

        output: Optional[Path] = Path(options["output"]) if options.get("output") else None
        source = RemoteRadarService(options["backend"]) if options.get("backend") else views.get_radar_service()

        def report(frame: Frame) -> None:
            stamp = frame.completed_at.strftime("%H:%M:%S")
            self.stdout.write(f"[{stamp}] {frame.status_text}")
            if output is not None:
                rasterize(frame.operations, width, height).save(output, format="PNG")

        controller = RefreshController(source, width=width, height=height, interval=interval, observer=report)
        if options.get("once"):
            controller.trigger_now()
            return

        controller.start()
        try:
            threading.Event().wait()
        except KeyboardInterrupt:
            self.stdout.write("Stopping radar refresh")
        finally:
            controller.stop()
