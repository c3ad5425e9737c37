"""
nmea/fields.py

Helpers that turn individual NMEA fields into optional typed values.

Every helper returns ``None`` instead of raising when a field is missing,
empty or unparsable, so one bad field never aborts the rest of a sentence.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence


def field_at(fields: Sequence[str], index: int) -> Optional[str]:
    """Return ``fields[index]`` or ``None`` when the sentence is too short."""
    if 0 <= index < len(fields):
        return fields[index]
    return None


def strip_checksum(value: str) -> str:
    """Drop a trailing ``*HH`` checksum suffix from a field."""
    return value.split("*", 1)[0]


def parse_text(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return value


def parse_float(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parse_int(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_uint(value: Optional[str], bits: int = 16) -> Optional[int]:
    """Parse an unsigned integer that must fit in *bits* bits."""
    number = parse_int(value)
    if number is None or number < 0 or number >= 1 << bits:
        return None
    return number


def parse_coordinate(value: Optional[str], hemisphere: Optional[str]) -> Optional[float]:
    """Convert an NMEA ``DDMM.mmmm`` / ``DDDMM.mmmm`` field to decimal degrees.

    The degree count is ``floor(value / 100)`` and the remainder is minutes,
    so the same rule serves both latitude and longitude.  South and West
    hemispheres are negative.

    Args:
        value: Numeric coordinate field, e.g. ``"4807.038"``.
        hemisphere: ``"N"``, ``"S"``, ``"E"`` or ``"W"``.

    Returns:
        Signed decimal degrees, or ``None`` if either field is missing or the
        value is not a number.
    """
    number = parse_float(value)
    if number is None or not math.isfinite(number) or not hemisphere:
        return None
    degrees = math.floor(number / 100.0)
    minutes = number % 100.0
    decimal = degrees + minutes / 60.0
    if hemisphere.strip().upper() in ("S", "W"):
        decimal = -decimal
    return decimal


def first_numbers(fields: Sequence[str], start: int, count: int) -> List[float]:
    """Collect up to *count* numeric values from ``fields[start:]``.

    Empty and non-numeric fields are skipped; a trailing checksum on a field
    is ignored.
    """
    values: List[float] = []
    for raw in fields[start:]:
        number = parse_float(strip_checksum(raw))
        if number is None:
            continue
        values.append(number)
        if len(values) == count:
            break
    return values
