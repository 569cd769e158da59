"""In-memory health registry for the radar service.

Nothing is persisted: the registry only tracks what the running process has
seen since it started, which is all ``/api/health`` needs to report.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Dict, Iterable, Optional

from backend.core.abstractions import ProbeAttempt, RadarRecord, format_timestamp


@dataclass(frozen=True)
class ResultCounters:
    """Simple container for per-status result counters."""

    live: int = 0
    sample: int = 0
    error: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {"live": self.live, "sample": self.sample, "error": self.error}


class HealthRegistry:
    """Stores uptime, probe failure counters and the last acquisition result."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._started = clock()
        self._probe_failures: Dict[str, int] = {}
        self._results = ResultCounters()
        self._last_result: Optional[Dict[str, object]] = None
        self._lock = Lock()

    def uptime(self) -> float:
        return max(0.0, self._clock() - self._started)

    # -- Probe failures -----------------------------------------------------
    def record_attempts(self, attempts: Iterable[ProbeAttempt]) -> None:
        failed = [attempt.url for attempt in attempts if not attempt.reachable]
        if not failed:
            return
        with self._lock:
            for url in failed:
                self._probe_failures[url] = self._probe_failures.get(url, 0) + 1

    # -- Results ------------------------------------------------------------
    def record_result(self, record: RadarRecord) -> None:
        summary: Dict[str, object] = {
            "status": record.status.value,
            "timestamp": format_timestamp(record.timestamp),
        }
        if record.source_url:
            summary["dataUrl"] = record.source_url
        if record.message:
            summary["message"] = record.message
        with self._lock:
            counts = self._results.as_dict()
            counts[record.status.value] += 1
            self._results = ResultCounters(**counts)
            self._last_result = summary

    # -- Snapshot -----------------------------------------------------------
    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            failures = dict(self._probe_failures)
            results = self._results.as_dict()
            last_result = dict(self._last_result) if self._last_result else None
        return {
            "uptime_seconds": round(self.uptime(), 3),
            "probe_failures": failures,
            "results": results,
            "last_result": last_result,
        }


def utc_now_iso(now: Optional[datetime] = None) -> str:
    return format_timestamp(now or datetime.now(timezone.utc))


__all__ = ["HealthRegistry", "ResultCounters", "utc_now_iso"]
