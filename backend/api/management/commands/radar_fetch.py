"""Management command to resolve radar data using the same stack as the API."""
from __future__ import annotations

import json
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from backend.api import views
from backend.core.providers.mrms import parse_candidate_list
from backend.core.services.radar_service import build_radar_service
from backend.core.services.sample import SampleSynthesizer


class Command(BaseCommand):
    help = "Resolve the latest radar record and print it as JSON"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--sample", action="store_true", help="Skip probing and print the synthetic record")
        parser.add_argument("--candidates", type=str, help="Comma separated candidate URLs, in priority order")
        parser.add_argument("--timeout", type=float, help="Seconds allowed per candidate")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        timeout = options.get("timeout")
        if timeout is not None and timeout <= 0:
            raise CommandError("--timeout must be positive")

        if options.get("sample"):
            record = SampleSynthesizer().synthesize("sample requested")
        elif options.get("candidates") or timeout is not None:
            candidates = settings.RADAR_CANDIDATE_URLS
            if options.get("candidates"):
                candidates = parse_candidate_list(options["candidates"])
            service = build_radar_service(
                candidates,
                timeout=timeout or settings.RADAR_PROBE_TIMEOUT,
                refresh_interval=settings.RADAR_REFRESH_INTERVAL,
                overall_deadline=settings.RADAR_OVERALL_DEADLINE,
                user_agent=settings.RADAR_USER_AGENT,
            )
            record = service.get_latest()
        else:
            record = views.get_radar_service().get_latest()

        self.stdout.write(json.dumps(record.as_dict()))
