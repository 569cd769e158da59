from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from backend.core.abstractions import CONUS_BOUNDS, RadarStatus
from backend.core.health import HealthRegistry
from backend.core.services.radar_service import RadarService, build_radar_service
from backend.core.services.resolver import Resolver
from backend.core.services.sample import NO_REACHABLE_SOURCE, SampleSynthesizer
from helpers import FIXED_NOW, ExplodingProbe, ScriptedProbe

A = "https://a.test/latest"
B = "https://b.test/latest"


def make_service(probe, candidates, **kwargs) -> RadarService:
    clock = getattr(probe, "clock", time.monotonic)
    resolver = Resolver(probe, now=lambda: FIXED_NOW, refresh_interval=120.0, clock=clock)
    synthesizer = SampleSynthesizer(now=lambda: FIXED_NOW)
    return RadarService(resolver, candidates, synthesizer=synthesizer, **kwargs)


def test_live_source_is_returned_with_update_hint() -> None:
    service = make_service(ScriptedProbe({A: False, B: True}), [A, B])

    record = service.get_latest()

    assert record.status is RadarStatus.LIVE
    assert record.source_url == B
    assert record.next_update == FIXED_NOW + timedelta(minutes=2)
    assert record.message is None


def test_empty_candidate_list_degrades_to_sample() -> None:
    record = make_service(ScriptedProbe({}), []).get_latest()

    assert record.status is RadarStatus.SAMPLE
    assert record.message == NO_REACHABLE_SOURCE
    assert record.source_url is None
    assert record.bounds.nw == (49.0, -125.0)
    assert record.bounds.ne == (49.0, -67.0)
    assert record.bounds.se == (25.0, -67.0)
    assert record.bounds.sw == (25.0, -125.0)


def test_unreachable_candidates_degrade_to_sample() -> None:
    record = make_service(ScriptedProbe({A: False, B: False}), [A, B]).get_latest()

    assert record.status is RadarStatus.SAMPLE
    assert record.message


def test_structural_failure_still_yields_sample_with_description() -> None:
    record = make_service(ExplodingProbe(), [A]).get_latest()

    assert record.status is RadarStatus.SAMPLE
    assert "probe exploded" in record.message


def test_malformed_candidate_list_yields_sample() -> None:
    record = make_service(ScriptedProbe({}), "https://a.test/latest").get_latest()

    assert record.status is RadarStatus.SAMPLE
    assert "TypeError" in record.message


def test_service_never_raises_even_if_resolver_does() -> None:
    class BrokenResolver(Resolver):
        def resolve(self, candidates, timeout_per_candidate, overall_deadline=None):
            raise KeyError("broken")

    service = RadarService(BrokenResolver(ScriptedProbe({})), [A])

    record = service.get_latest()

    assert record.status is RadarStatus.SAMPLE
    assert "KeyError" in record.message


def test_each_call_probes_again() -> None:
    probe = ScriptedProbe({A: True})
    service = make_service(probe, [A])

    service.get_latest()
    service.get_latest()

    assert [url for url, _ in probe.calls] == [A, A]


def test_timeouts_are_forwarded_to_the_probe() -> None:
    probe = ScriptedProbe({A: False, B: False}, delays={A: 10.0, B: 10.0})
    service = make_service(probe, [A, B], timeout=3.0, overall_deadline=4.0)

    service.get_latest()

    assert probe.calls == [(A, 3.0), (B, pytest.approx(1.0))]


def test_health_registry_tracks_results_and_failures() -> None:
    health = HealthRegistry()
    probe = ScriptedProbe({A: False, B: True})
    service = make_service(probe, [A, B], health=health)

    service.get_latest()
    probe.script[B] = False
    service.get_latest()

    snapshot = health.snapshot()
    assert snapshot["results"] == {"live": 1, "sample": 1, "error": 0}
    assert snapshot["probe_failures"] == {A: 2, B: 1}
    assert snapshot["last_result"]["status"] == "sample"


def test_sample_synthesizer_respects_bounds_invariants() -> None:
    record = SampleSynthesizer().synthesize("maintenance window")

    assert record.status is RadarStatus.SAMPLE
    assert record.message == "maintenance window"
    assert record.bounds == CONUS_BOUNDS
    assert record.bounds.nw[0] == record.bounds.ne[0]
    assert record.bounds.sw[0] == record.bounds.se[0]
    assert record.bounds.nw[0] > record.bounds.sw[0]
    assert record.bounds.nw[1] < record.bounds.ne[1]


def test_build_radar_service_probes_over_http(requests_mock) -> None:
    requests_mock.head(A, status_code=200)

    record = build_radar_service([A], timeout=1.0).get_latest()

    assert record.status is RadarStatus.LIVE
    assert record.source_url == A
    assert requests_mock.last_request.headers["User-Agent"] == "mrms-radar-probe/1.0"


def test_generator_candidates_survive_repeated_calls() -> None:
    probe = ScriptedProbe({A: False, B: True})
    service = make_service(probe, (url for url in [A, B]))

    first = service.get_latest()
    second = service.get_latest()

    assert first.source_url == B
    assert second.source_url == B
    assert [url for url, _ in probe.calls] == [A, B, A, B]


def test_shared_service_is_safe_across_threads(requests_mock) -> None:
    requests_mock.head(A, status_code=503)
    requests_mock.head(B, status_code=200)
    health = HealthRegistry()
    service = build_radar_service([A, B], timeout=1.0, health=health)

    with ThreadPoolExecutor(max_workers=16) as pool:
        records = list(pool.map(lambda _: service.get_latest(), range(16)))

    assert all(record.status is RadarStatus.LIVE for record in records)
    assert {record.source_url for record in records} == {B}
    snapshot = health.snapshot()
    assert snapshot["results"]["live"] == 16
    assert snapshot["probe_failures"] == {A: 16}
