"""Client for a remote radar backend's ``/api/radar/latest`` endpoint."""
from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Callable, Optional

import requests

from backend.core.abstractions import CONUS_BOUNDS, RadarRecord, RadarStatus
from backend.core.providers.mrms import PRODUCT


logger = logging.getLogger(__name__)


class RemoteRadarService:
    """Fetch records over HTTP with the same never-raise contract as the local service.

    When the backend cannot be reached the caller gets an ``error`` record over
    the canonical bounds, which still renders as a base map.
    """

    latest_path = "/api/radar/latest"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        now: Callable[[], datetime] = lambda: datetime.now(tz=timezone.utc),
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self._now = now

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.latest_path}"

    def get_latest(self) -> RadarRecord:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Radar backend %s unreachable: %s", self.base_url, exc)
            return self._error_record(f"Backend unreachable: {exc.__class__.__name__}")
        if response.status_code >= 400:
            logger.warning("Radar backend %s answered %s", self.base_url, response.status_code)
            return self._error_record(f"Server error: {response.status_code}")
        try:
            return RadarRecord.from_dict(response.json())
        except ValueError as exc:
            logger.error("Radar backend returned an invalid record", exc_info=exc)
            return self._error_record(f"Invalid record: {exc}")

    def _error_record(self, message: str) -> RadarRecord:
        return RadarRecord(
            status=RadarStatus.ERROR,
            product=PRODUCT,
            bounds=CONUS_BOUNDS,
            timestamp=self._now(),
            message=message,
        )


__all__ = ["RemoteRadarService"]
