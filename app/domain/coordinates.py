"""
app/domain/coordinates.py

Codec for the "latitude,longitude" text encoding stored on every unit.
"""

from __future__ import annotations

import math
import re
from typing import Any

LATITUDE_RANGE: tuple[float, float] = (-90.0, 90.0)
LONGITUDE_RANGE: tuple[float, float] = (-180.0, 180.0)

_DECIMAL_PLACES = 6
# Plain ASCII decimal or exponent notation; no digit separators or non-Latin numerals.
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def _parse_segment(segment: str) -> float | None:
    text = segment.strip()
    if not _DECIMAL_PATTERN.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def parse_coordinate_pair(text: Any) -> tuple[float, float] | None:
    """
    Decode ``"<lat>,<lng>"`` into a ``(lat, lng)`` tuple.

    Returns None for anything that is not exactly two finite decimal
    segments within latitude/longitude range. Never raises.
    """

    if not isinstance(text, str) or not text:
        return None

    parts = text.split(",")
    if len(parts) != 2:
        return None

    lat = _parse_segment(parts[0])
    lng = _parse_segment(parts[1])
    if lat is None or lng is None:
        return None

    if not LATITUDE_RANGE[0] <= lat <= LATITUDE_RANGE[1]:
        return None
    if not LONGITUDE_RANGE[0] <= lng <= LONGITUDE_RANGE[1]:
        return None

    return lat, lng


def is_valid_coordinate_pair(text: Any) -> bool:
    return parse_coordinate_pair(text) is not None


def format_coordinate_pair(lat: float, lng: float) -> str:
    """
    Render a coordinate pair with six decimal places and no whitespace.
    """

    return f"{lat:.{_DECIMAL_PLACES}f},{lng:.{_DECIMAL_PLACES}f}"
