from __future__ import annotations

import requests

from backend.client.remote import RemoteRadarService
from backend.core.abstractions import CONUS_BOUNDS, RadarStatus
from helpers import FIXED_NOW

BACKEND = "https://radar.test"
LATEST = "https://radar.test/api/radar/latest"


def make_client() -> RemoteRadarService:
    return RemoteRadarService(BACKEND + "/", now=lambda: FIXED_NOW)


def test_remote_record_is_parsed(requests_mock, sample_record) -> None:
    requests_mock.get(LATEST, json=sample_record.as_dict())

    record = make_client().get_latest()

    assert record == sample_record


def test_server_error_becomes_error_record(requests_mock) -> None:
    requests_mock.get(LATEST, status_code=502, text="bad gateway")

    record = make_client().get_latest()

    assert record.status is RadarStatus.ERROR
    assert record.message == "Server error: 502"
    assert record.bounds == CONUS_BOUNDS
    assert record.timestamp == FIXED_NOW


def test_unreachable_backend_becomes_error_record(requests_mock) -> None:
    requests_mock.get(LATEST, exc=requests.exceptions.ConnectionError)

    record = make_client().get_latest()

    assert record.status is RadarStatus.ERROR
    assert "ConnectionError" in record.message


def test_garbage_payload_becomes_error_record(requests_mock) -> None:
    requests_mock.get(LATEST, text="<html>oops</html>")

    record = make_client().get_latest()

    assert record.status is RadarStatus.ERROR
    assert record.message.startswith("Invalid record")
