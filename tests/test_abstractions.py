from __future__ import annotations

from datetime import timedelta

import pytest

from backend.core.abstractions import CONUS_BOUNDS, GeoBounds, RadarRecord, RadarStatus
from helpers import FIXED_NOW


def test_conus_bounds_corners() -> None:
    assert CONUS_BOUNDS.nw == (49.0, -125.0)
    assert CONUS_BOUNDS.ne == (49.0, -67.0)
    assert CONUS_BOUNDS.se == (25.0, -67.0)
    assert CONUS_BOUNDS.sw == (25.0, -125.0)


def test_from_extent_builds_a_valid_box() -> None:
    bounds = GeoBounds.from_extent(north=50.0, south=40.0, west=-10.0, east=5.0)

    assert bounds.nw == (50.0, -10.0)
    assert bounds.se == (40.0, 5.0)
    assert bounds.contains(45.0, 0.0)
    assert not bounds.contains(39.9, 0.0)


@pytest.mark.parametrize(
    "corners",
    [
        # south edge above north edge
        dict(nw=(25.0, -125.0), ne=(25.0, -67.0), se=(49.0, -67.0), sw=(49.0, -125.0)),
        # east edge left of west edge
        dict(nw=(49.0, -67.0), ne=(49.0, -125.0), se=(25.0, -125.0), sw=(25.0, -67.0)),
        # tilted north edge
        dict(nw=(49.0, -125.0), ne=(48.0, -67.0), se=(25.0, -67.0), sw=(25.0, -125.0)),
        # degenerate
        dict(nw=(30.0, -100.0), ne=(30.0, -100.0), se=(30.0, -100.0), sw=(30.0, -100.0)),
    ],
)
def test_invalid_bounds_are_rejected(corners) -> None:
    with pytest.raises(ValueError):
        GeoBounds(**corners)


def test_bounds_are_immutable() -> None:
    with pytest.raises(AttributeError):
        CONUS_BOUNDS.nw = (0.0, 0.0)  # type: ignore[misc]


def test_project_maps_corners_to_surface_edges() -> None:
    assert CONUS_BOUNDS.project(49.0, -125.0, 1000, 700) == (0.0, 0.0)
    assert CONUS_BOUNDS.project(25.0, -67.0, 1000, 700) == (1000.0, 700.0)
    x, y = CONUS_BOUNDS.project(37.0, -96.0, 1000, 700)
    assert x == pytest.approx(500.0)
    assert y == pytest.approx(350.0)


def test_live_record_requires_source_url() -> None:
    with pytest.raises(ValueError):
        RadarRecord(status=RadarStatus.LIVE, product="RALA", bounds=CONUS_BOUNDS, timestamp=FIXED_NOW)


def test_sample_record_cannot_carry_source_url() -> None:
    with pytest.raises(ValueError):
        RadarRecord(
            status=RadarStatus.SAMPLE,
            product="RALA",
            bounds=CONUS_BOUNDS,
            timestamp=FIXED_NOW,
            source_url="https://example.test/latest",
        )


def test_live_record_serialization() -> None:
    record = RadarRecord(
        status="live",
        product="RALA",
        bounds=CONUS_BOUNDS,
        timestamp=FIXED_NOW,
        source_url="https://example.test/latest",
        next_update=FIXED_NOW + timedelta(minutes=2),
    )

    payload = record.as_dict()

    assert payload == {
        "status": "live",
        "sample": False,
        "timestamp": "2024-06-01T12:00:00Z",
        "product": "RALA",
        "bounds": {
            "nw": [49.0, -125.0],
            "ne": [49.0, -67.0],
            "se": [25.0, -67.0],
            "sw": [25.0, -125.0],
        },
        "dataUrl": "https://example.test/latest",
        "nextUpdate": "2024-06-01T12:02:00Z",
    }
    assert RadarRecord.from_dict(payload) == record


def test_from_dict_accepts_legacy_sample_flag() -> None:
    payload = {
        "sample": True,
        "timestamp": "2024-06-01T12:00:00.000Z",
        "product": "RALA",
        "bounds": {"nw": [49.0, -125.0], "ne": [49.0, -67.0], "se": [25.0, -67.0], "sw": [25.0, -125.0]},
    }

    record = RadarRecord.from_dict(payload)

    assert record.status is RadarStatus.SAMPLE
    assert record.is_sample
    assert record.timestamp == FIXED_NOW


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"status": "live", "product": "RALA", "timestamp": "2024-06-01T12:00:00Z", "bounds": {}},
        {"status": "bogus", "product": "RALA", "timestamp": "2024-06-01T12:00:00Z", "bounds": CONUS_BOUNDS.as_dict()},
        ["not", "a", "record"],
    ],
)
def test_from_dict_rejects_malformed_payloads(payload) -> None:
    with pytest.raises(ValueError):
        RadarRecord.from_dict(payload)
