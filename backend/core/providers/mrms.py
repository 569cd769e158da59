"""NOAA MRMS product constants and default candidate sources."""
from __future__ import annotations

from typing import List

PRODUCT = "RALA"

MRMS_BASE_URL = "https://mrms.ncep.noaa.gov/data"
PRODUCT_PATH = "2D/ReflectivityAtLowestAltitude"
LATEST_FILE = "MRMS_ReflectivityAtLowestAltitude.latest.grib2.gz"

DEFAULT_CANDIDATE_URLS: List[str] = [
    f"{MRMS_BASE_URL}/{PRODUCT_PATH}/{LATEST_FILE}",
    f"{MRMS_BASE_URL}/{PRODUCT_PATH}/",
    "https://noaa-mrms-pds.s3.amazonaws.com/CONUS/ReflectivityAtLowestAltitude_00.50/",
]


def parse_candidate_list(raw: str) -> List[str]:
    """Split a comma separated setting into an ordered candidate list."""
    return [item.strip() for item in raw.split(",") if item.strip()]


__all__ = [
    "DEFAULT_CANDIDATE_URLS",
    "LATEST_FILE",
    "PRODUCT",
    "parse_candidate_list",
]
