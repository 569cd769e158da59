"""Ordered resolution of the first reachable radar source."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional, Protocol
from urllib.parse import urlparse

from backend.core.abstractions import (
    CONUS_BOUNDS,
    GeoBounds,
    Live,
    NoLiveSource,
    ProbeAttempt,
    RadarRecord,
    RadarStatus,
    ResolveOutcome,
    StructuralError,
)
from backend.core.providers.mrms import PRODUCT


class CandidateProbe(Protocol):
    def probe(self, url: str, timeout: Optional[float] = None) -> ProbeAttempt:
        """Check one candidate, reporting failures in the returned attempt."""
        ...


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def validate_candidates(candidates: Iterable[str]) -> List[str]:
    """Return the candidates as a list, rejecting anything that is not an absolute URL."""
    if isinstance(candidates, (str, bytes)) or candidates is None:
        raise TypeError(f"candidates must be a sequence of URLs, got {type(candidates).__name__}")
    urls = list(candidates)
    for url in urls:
        if not isinstance(url, str):
            raise TypeError(f"candidate {url!r} is not a string")
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"candidate {url!r} is not an absolute http(s) URL")
    return urls


class Resolver:
    """Probe candidates in order and stop at the first one that answers.

    The resolver holds no per-call state, so a single instance can serve
    concurrent callers.  Individual candidate failures are skipped; anything
    unexpected while scanning is reported as :class:`StructuralError` instead of
    being raised.
    """

    def __init__(
        self,
        probe: CandidateProbe,
        *,
        product: str = PRODUCT,
        bounds: GeoBounds = CONUS_BOUNDS,
        refresh_interval: float = 120.0,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._probe = probe
        self.product = product
        self.bounds = bounds
        self.refresh_interval = refresh_interval
        self._clock = clock
        self._now = now
        self._log = logging.getLogger(self.__class__.__name__)

    def resolve(
        self,
        candidates: Iterable[str],
        timeout_per_candidate: float,
        overall_deadline: Optional[float] = None,
    ) -> ResolveOutcome:
        attempts: List[ProbeAttempt] = []
        try:
            urls = validate_candidates(candidates)
            if timeout_per_candidate <= 0:
                raise ValueError("timeout_per_candidate must be positive")
            started = self._clock()
            for url in urls:
                timeout = timeout_per_candidate
                if overall_deadline is not None:
                    remaining = overall_deadline - (self._clock() - started)
                    if remaining <= 0:
                        self._log.warning("Deadline of %.1fs reached before probing %s", overall_deadline, url)
                        break
                    timeout = min(timeout, remaining)
                attempt = self._probe.probe(url, timeout)
                attempts.append(attempt)
                if attempt.reachable:
                    self._log.info("Resolved live radar source %s in %.2fs", url, attempt.elapsed)
                    return Live(record=self._live_record(url), attempts=tuple(attempts))
                self._log.warning("Candidate %s unavailable: %s", url, attempt.error)
        except Exception as exc:  # noqa: BLE001 - surfaced as a structural failure
            self._log.error("Radar source resolution failed", exc_info=exc)
            return StructuralError(description=f"{exc.__class__.__name__}: {exc}", attempts=tuple(attempts))
        return NoLiveSource(attempts=tuple(attempts))

    def _live_record(self, url: str) -> RadarRecord:
        now = self._now()
        return RadarRecord(
            status=RadarStatus.LIVE,
            product=self.product,
            bounds=self.bounds,
            timestamp=now,
            source_url=url,
            next_update=now + timedelta(seconds=self.refresh_interval),
        )


__all__ = ["CandidateProbe", "Resolver", "validate_candidates"]
