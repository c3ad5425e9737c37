"""
constellation.py

The fixed set of satellite constellations tracked by a multi-GNSS receiver,
together with the PRN numbering ranges used to attribute a satellite to its
constellation and the nominal single-constellation accuracy of each system.

PRN ranges
----------
==========  =========
System      PRN range
==========  =========
GPS         1 – 32
GLONASS     65 – 96
BEIDOU      201 – 236
GALILEO     301 – 336
==========  =========
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple


class Constellation(str, Enum):
    """A satellite navigation system.

    Declaration order is the canonical ordering used wherever a list of
    constellations is reported.
    """

    GPS = "GPS"
    GLONASS = "GLONASS"
    GALILEO = "GALILEO"
    BEIDOU = "BEIDOU"

    @classmethod
    def from_name(cls, name: object) -> Optional["Constellation"]:
        """Look up a constellation by name (case-insensitive).

        Returns ``None`` for unknown names instead of raising.
        """
        if isinstance(name, Constellation):
            return name
        if not isinstance(name, str):
            return None
        try:
            return cls(name.strip().upper())
        except ValueError:
            return None


PRN_RANGES: Dict[Constellation, Tuple[int, int]] = {
    Constellation.GPS: (1, 32),
    Constellation.GLONASS: (65, 96),
    Constellation.BEIDOU: (201, 236),
    Constellation.GALILEO: (301, 336),
}

# Nominal single-constellation horizontal accuracy in metres.
DEFAULT_ACCURACY: Dict[Constellation, float] = {
    Constellation.GPS: 2.0,
    Constellation.GLONASS: 4.0,
    Constellation.GALILEO: 3.0,
    Constellation.BEIDOU: 3.0,
}


def classify_prn(prn: int) -> Optional[Constellation]:
    """Return the constellation a PRN number belongs to, or ``None``."""
    for constellation, (low, high) in PRN_RANGES.items():
        if low <= prn <= high:
            return constellation
    return None
