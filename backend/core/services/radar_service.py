"""Radar service that resolves a live source and degrades to sample data."""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from backend.core.abstractions import (
    Live,
    NoLiveSource,
    RadarRecord,
    ResolveOutcome,
    StructuralError,
)
from backend.core.health import HealthRegistry
from backend.core.providers.base import HttpProbe, RequestConfig
from backend.core.services.resolver import Resolver
from backend.core.services.sample import NO_REACHABLE_SOURCE, SampleSynthesizer


logger = logging.getLogger(__name__)


class RadarService:
    """Return exactly one record per call and never raise.

    Every call probes afresh; there is no cross-call cache.  Callers that want
    a "last known record" keep it themselves.
    """

    def __init__(
        self,
        resolver: Resolver,
        candidates: Iterable[str],
        *,
        synthesizer: Optional[SampleSynthesizer] = None,
        timeout: float = 5.0,
        overall_deadline: Optional[float] = None,
        health: Optional[HealthRegistry] = None,
    ) -> None:
        self._resolver = resolver
        self.candidates = tuple(candidates) if isinstance(candidates, Iterator) else candidates
        self._synthesizer = synthesizer or SampleSynthesizer(product=resolver.product, bounds=resolver.bounds)
        self.timeout = timeout
        self.overall_deadline = overall_deadline
        self._health = health

    def get_latest(self) -> RadarRecord:
        try:
            outcome = self._resolver.resolve(self.candidates, self.timeout, self.overall_deadline)
            record = self._record_for(outcome)
        except Exception as exc:  # noqa: BLE001 - the service boundary must not raise
            logger.error("Radar acquisition failed unexpectedly", exc_info=exc)
            record = self._synthesizer.synthesize(f"{exc.__class__.__name__}: {exc}")
        if self._health is not None:
            self._health.record_result(record)
        return record

    def _record_for(self, outcome: ResolveOutcome) -> RadarRecord:
        if self._health is not None:
            self._health.record_attempts(outcome.attempts)
        if isinstance(outcome, Live):
            return outcome.record
        if isinstance(outcome, NoLiveSource):
            logger.warning("No live radar source among %d probed, serving sample data", len(outcome.attempts))
            return self._synthesizer.synthesize(NO_REACHABLE_SOURCE)
        if isinstance(outcome, StructuralError):
            logger.error("Radar source resolution broke down: %s", outcome.description)
            return self._synthesizer.synthesize(outcome.description)
        raise TypeError(f"unexpected resolver outcome {outcome!r}")


def build_radar_service(
    candidates: Iterable[str],
    *,
    timeout: float = 5.0,
    refresh_interval: float = 120.0,
    overall_deadline: Optional[float] = None,
    user_agent: Optional[str] = None,
    health: Optional[HealthRegistry] = None,
) -> RadarService:
    """Wire an HTTP probe, resolver and synthesizer into a service."""
    config = RequestConfig(timeout=timeout)
    if user_agent:
        config.user_agent = user_agent
    resolver = Resolver(HttpProbe(request_config=config), refresh_interval=refresh_interval)
    return RadarService(
        resolver,
        tuple(candidates),
        timeout=timeout,
        overall_deadline=overall_deadline,
        health=health,
    )


__all__ = ["RadarService", "build_radar_service"]
