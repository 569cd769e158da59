"""Synthetic fallback records used when no live source answers."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from backend.core.abstractions import CONUS_BOUNDS, GeoBounds, RadarRecord, RadarStatus
from backend.core.providers.mrms import PRODUCT

NO_REACHABLE_SOURCE = "no reachable source"


class SampleSynthesizer:
    """Build sample records without touching the network."""

    def __init__(
        self,
        *,
        product: str = PRODUCT,
        bounds: GeoBounds = CONUS_BOUNDS,
        now: Callable[[], datetime] = lambda: datetime.now(tz=timezone.utc),
    ) -> None:
        self.product = product
        self.bounds = bounds
        self._now = now

    def synthesize(self, reason: str = NO_REACHABLE_SOURCE) -> RadarRecord:
        return RadarRecord(
            status=RadarStatus.SAMPLE,
            product=self.product,
            bounds=self.bounds,
            timestamp=self._now(),
            message=reason or NO_REACHABLE_SOURCE,
        )


__all__ = ["NO_REACHABLE_SOURCE", "SampleSynthesizer"]
