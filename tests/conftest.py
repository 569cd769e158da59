from __future__ import annotations

import pytest

from backend.core.services.sample import SampleSynthesizer
from helpers import FIXED_NOW, TimeController


@pytest.fixture()
def clock() -> TimeController:
    return TimeController()


@pytest.fixture()
def sample_record():
    return SampleSynthesizer(now=lambda: FIXED_NOW).synthesize("no reachable source")
