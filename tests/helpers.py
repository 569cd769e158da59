from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from backend.core.abstractions import ProbeAttempt


FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TimeController:
    def __init__(self) -> None:
        self.now = 0.0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class ScriptedProbe:
    """Probe stub: each URL answers according to ``script`` and costs ``delays`` seconds."""

    def __init__(
        self,
        script: Dict[str, bool],
        clock: Optional[TimeController] = None,
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self.script = script
        self.clock = clock or TimeController()
        self.delays = delays or {}
        self.calls: List[tuple] = []

    def probe(self, url: str, timeout: Optional[float] = None) -> ProbeAttempt:
        self.calls.append((url, timeout))
        delay = self.delays.get(url, 0.1)
        if timeout is not None:
            delay = min(delay, timeout)
        self.clock.advance(delay)
        reachable = self.script.get(url, False)
        return ProbeAttempt(
            url=url,
            reachable=reachable,
            elapsed=delay,
            status_code=200 if reachable else None,
            error=None if reachable else "timed out",
        )


class ExplodingProbe:
    def probe(self, url: str, timeout: Optional[float] = None) -> ProbeAttempt:
        raise RuntimeError("probe exploded")
