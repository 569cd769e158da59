"""Timer driven refresh loop for radar consumers.

The controller is either ``idle`` or ``polling``.  ``start()`` runs a cycle
right away and keeps re-arming a timer; ``stop()`` disarms it without
interrupting a cycle that is already running.  ``trigger_now()`` runs one extra
cycle and leaves the schedule alone.  Whichever cycle finishes last becomes
:attr:`RefreshController.latest`.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional, Tuple

from backend.core.abstractions import RadarRecord, RadarSource, RadarStatus
from backend.render.operations import DrawOperation
from backend.render.renderer import render


logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 120.0

Renderer = Callable[[float, float, RadarRecord], List[DrawOperation]]


class ControllerState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"


def describe(record: RadarRecord) -> str:
    """Status line shown next to the map."""
    if record.status is RadarStatus.LIVE:
        return f"Live data from {record.source_url}"
    if record.status is RadarStatus.ERROR:
        return f"Error - {record.message or 'radar data unavailable'}"
    return f"Using sample data - {record.message or 'real MRMS data currently unavailable'}"


@dataclass(frozen=True)
class Frame:
    record: RadarRecord
    operations: Tuple[DrawOperation, ...]
    completed_at: datetime

    @property
    def degraded(self) -> bool:
        return self.record.status is not RadarStatus.LIVE

    @property
    def status_text(self) -> str:
        return describe(self.record)


class RefreshController:
    def __init__(
        self,
        source: RadarSource,
        *,
        width: float = 1000,
        height: float = 700,
        interval: float = DEFAULT_INTERVAL,
        observer: Optional[Callable[[Frame], None]] = None,
        renderer: Renderer = render,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        now: Callable[[], datetime] = lambda: datetime.now(tz=timezone.utc),
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._source = source
        self.width = width
        self.height = height
        self.interval = interval
        self._observer = observer
        self._renderer = renderer
        self._timer_factory = timer_factory
        self._now = now
        self._state = ControllerState.IDLE
        self._generation = 0
        self._timer: Optional[threading.Timer] = None
        self._latest: Optional[Frame] = None
        self._cycles = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def latest(self) -> Optional[Frame]:
        return self._latest

    @property
    def cycles(self) -> int:
        return self._cycles

    # -- State transitions ----------------------------------------------------
    def start(self) -> Optional[Frame]:
        with self._lock:
            if self._state is ControllerState.POLLING:
                return None
            self._state = ControllerState.POLLING
            self._generation += 1
            generation = self._generation
        logger.info("Radar refresh started, every %.0fs", self.interval)
        try:
            return self.run_cycle()
        finally:
            self._schedule(generation)

    def stop(self) -> None:
        with self._lock:
            self._state = ControllerState.IDLE
            self._generation += 1
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        logger.info("Radar refresh stopped")

    def trigger_now(self) -> Frame:
        return self.run_cycle()

    # -- Cycles ---------------------------------------------------------------
    def run_cycle(self) -> Frame:
        record = self._source.get_latest()
        operations = tuple(self._renderer(self.width, self.height, record))
        frame = Frame(record=record, operations=operations, completed_at=self._now())
        with self._lock:
            self._latest = frame
            self._cycles += 1
        if frame.degraded:
            logger.warning("Radar cycle degraded: %s", frame.status_text)
        else:
            logger.info("Radar cycle complete: %s", frame.status_text)
        self._notify(frame)
        return frame

    def _notify(self, frame: Frame) -> None:
        if self._observer is None:
            return
        try:
            self._observer(frame)
        except Exception as exc:  # noqa: BLE001 - a broken observer must not stop polling
            logger.error("Radar observer failed", exc_info=exc)

    def _schedule(self, generation: int) -> None:
        with self._lock:
            if self._state is not ControllerState.POLLING or generation != self._generation:
                return
            timer = self._timer_factory(self.interval, self._tick, args=(generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def _tick(self, generation: int) -> None:
        with self._lock:
            if self._state is not ControllerState.POLLING or generation != self._generation:
                return
        try:
            self.run_cycle()
        except Exception as exc:  # noqa: BLE001 - keep the schedule alive
            logger.error("Scheduled radar cycle failed", exc_info=exc)
        finally:
            self._schedule(generation)


__all__ = ["ControllerState", "DEFAULT_INTERVAL", "Frame", "RefreshController", "describe"]
