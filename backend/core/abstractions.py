"""Core abstractions for the radar domain."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Tuple, Union

Coordinate = Tuple[float, float]


@dataclass(frozen=True)
class GeoBounds:
    """Axis-aligned lat/long box described by its four corners.

    Each corner is a ``(latitude, longitude)`` pair.  The north edge must lie
    above the south edge and the west edge left of the east edge.
    """

    nw: Coordinate
    ne: Coordinate
    se: Coordinate
    sw: Coordinate

    def __post_init__(self) -> None:
        for name in ("nw", "ne", "se", "sw"):
            corner = getattr(self, name)
            if len(corner) != 2:
                raise ValueError(f"{name} must be a (latitude, longitude) pair")
            object.__setattr__(self, name, (float(corner[0]), float(corner[1])))
        if self.nw[0] != self.ne[0] or self.sw[0] != self.se[0]:
            raise ValueError("north and south edges must be parallels")
        if self.nw[1] != self.sw[1] or self.ne[1] != self.se[1]:
            raise ValueError("west and east edges must be meridians")
        if not self.nw[0] > self.sw[0]:
            raise ValueError("north edge must lie above the south edge")
        if not self.nw[1] < self.ne[1]:
            raise ValueError("west edge must lie left of the east edge")

    @classmethod
    def from_extent(cls, north: float, south: float, west: float, east: float) -> "GeoBounds":
        return cls(nw=(north, west), ne=(north, east), se=(south, east), sw=(south, west))

    @property
    def north(self) -> float:
        return self.nw[0]

    @property
    def south(self) -> float:
        return self.sw[0]

    @property
    def west(self) -> float:
        return self.nw[1]

    @property
    def east(self) -> float:
        return self.ne[1]

    def contains(self, latitude: float, longitude: float) -> bool:
        return self.south <= latitude <= self.north and self.west <= longitude <= self.east

    def project(self, latitude: float, longitude: float, width: float, height: float) -> Tuple[float, float]:
        """Map a coordinate to surface pixels, treating this box as the viewport."""
        x = (longitude - self.west) / (self.east - self.west) * width
        y = (self.north - latitude) / (self.north - self.south) * height
        return x, y

    def as_dict(self) -> Dict[str, list]:
        return {name: list(getattr(self, name)) for name in ("nw", "ne", "se", "sw")}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "GeoBounds":
        try:
            return cls(
                nw=tuple(payload["nw"]),
                ne=tuple(payload["ne"]),
                se=tuple(payload["se"]),
                sw=tuple(payload["sw"]),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"malformed bounds: {payload!r}") from exc


CONUS_BOUNDS = GeoBounds(nw=(49.0, -125.0), ne=(49.0, -67.0), se=(25.0, -67.0), sw=(25.0, -125.0))


class RadarStatus(str, Enum):
    LIVE = "live"
    SAMPLE = "sample"
    ERROR = "error"


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class RadarRecord:
    """Result of one acquisition cycle.

    ``source_url`` is set for live records only; sample and error records carry
    a ``message`` instead.
    """

    status: RadarStatus
    product: str
    bounds: GeoBounds
    timestamp: datetime
    source_url: Optional[str] = None
    next_update: Optional[datetime] = None
    message: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", RadarStatus(self.status))
        if self.status is RadarStatus.LIVE and not self.source_url:
            raise ValueError("live records require a source_url")
        if self.status is not RadarStatus.LIVE and self.source_url:
            raise ValueError(f"{self.status.value} records must not carry a source_url")

    @property
    def is_sample(self) -> bool:
        return self.status is not RadarStatus.LIVE

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "status": self.status.value,
            "sample": self.is_sample,
            "timestamp": format_timestamp(self.timestamp),
            "product": self.product,
            "bounds": self.bounds.as_dict(),
        }
        if self.source_url:
            payload["dataUrl"] = self.source_url
        if self.next_update is not None:
            payload["nextUpdate"] = format_timestamp(self.next_update)
        if self.message:
            payload["message"] = self.message
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "RadarRecord":
        if not isinstance(payload, dict):
            raise ValueError("record payload must be an object")
        try:
            status = payload.get("status")
            if status is None:
                status = RadarStatus.SAMPLE if payload["sample"] else RadarStatus.LIVE
            next_update = payload.get("nextUpdate")
            return cls(
                status=RadarStatus(status),
                product=str(payload["product"]),
                bounds=GeoBounds.from_dict(payload["bounds"]),
                timestamp=parse_timestamp(payload["timestamp"]),
                source_url=payload.get("dataUrl"),
                next_update=parse_timestamp(next_update) if next_update else None,
                message=payload.get("message"),
            )
        except KeyError as exc:
            raise ValueError(f"record payload is missing {exc.args[0]!r}") from exc


@dataclass(frozen=True)
class ProbeAttempt:
    """Outcome of probing a single candidate."""

    url: str
    reachable: bool
    elapsed: float
    status_code: Optional[int] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class Live:
    record: RadarRecord
    attempts: Tuple[ProbeAttempt, ...] = ()


@dataclass(frozen=True)
class NoLiveSource:
    attempts: Tuple[ProbeAttempt, ...] = ()


@dataclass(frozen=True)
class StructuralError:
    description: str
    attempts: Tuple[ProbeAttempt, ...] = ()


ResolveOutcome = Union[Live, NoLiveSource, StructuralError]


class RadarSource(Protocol):
    """Anything that hands out the latest radar record."""

    def get_latest(self) -> RadarRecord:
        """Return a record for the current cycle without raising."""
        ...


__all__ = [
    "CONUS_BOUNDS",
    "Coordinate",
    "GeoBounds",
    "Live",
    "NoLiveSource",
    "ProbeAttempt",
    "RadarRecord",
    "RadarSource",
    "RadarStatus",
    "ResolveOutcome",
    "StructuralError",
    "format_timestamp",
    "parse_timestamp",
]
