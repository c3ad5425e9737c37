"""
state.py

Receiver state mutated by the sentence decoders and read by the fusion
engine.

* :class:`SatelliteInfo` – one satellite reported in view.
* :class:`ConstellationState` – everything known about one constellation.
* :class:`GlobalState` – receiver-wide values plus the fixed constellation
  map and the last fused position.
* :class:`FusedPosition` – output of a fusion run.

Every value that comes from parsing a sentence field is ``Optional``; ``None``
means the field was absent or unparsable, which keeps "unset" distinct from
zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from gnss_fusion.accuracy import combine_accuracies
from gnss_fusion.constellation import DEFAULT_ACCURACY, Constellation


# ---------------------------------------------------------------------------
# Per-satellite / per-constellation state
# ---------------------------------------------------------------------------


@dataclass
class SatelliteInfo:
    """A satellite reported by a satellites-in-view sentence.

    Attributes:
        prn: PRN number identifying the satellite.
        elevation: Elevation angle in degrees.
        azimuth: Azimuth angle in degrees (0–359).
        snr: Signal-to-noise ratio in dBHz.
    """

    prn: int
    elevation: Optional[int] = None
    azimuth: Optional[int] = None
    snr: Optional[int] = None


@dataclass
class ConstellationState:
    """State of a single constellation.

    Attributes:
        satellites_used: PRNs named by active-satellites sentences, in
            arrival order.  Repeats across sentences are kept.
        satellites_info: Satellites in view keyed by PRN.  A later report
            for the same PRN overwrites the earlier one; entries never age
            out.
        pdop: Position dilution of precision.
        hdop: Horizontal dilution of precision.
        vdop: Vertical dilution of precision.
        latitude: Latitude of this constellation's fix in decimal degrees.
        longitude: Longitude of this constellation's fix in decimal degrees.
        altitude: Altitude of this constellation's fix in metres.
        accuracy: Nominal accuracy of the constellation in metres.
    """

    satellites_used: List[int] = field(default_factory=list)
    satellites_info: Dict[int, SatelliteInfo] = field(default_factory=dict)
    pdop: Optional[float] = None
    hdop: Optional[float] = None
    vdop: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    accuracy: float = 0.0

    @property
    def satellites_in_view(self) -> int:
        return len(self.satellites_info)

    @property
    def has_position(self) -> bool:
        """``True`` when both latitude and longitude are known."""
        return self.latitude is not None and self.longitude is not None

    def update_position(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        altitude: Optional[float] = None,
        *,
        with_altitude: bool = False,
    ) -> None:
        """Store a decoded fix, or clear it when no satellite is in view.

        Altitude is only overwritten when *with_altitude* is set, since not
        every position-bearing sentence carries one.  Clearing always drops
        altitude along with the coordinates.
        """
        if self.satellites_info:
            self.latitude = latitude
            self.longitude = longitude
            if with_altitude:
                self.altitude = altitude
        else:
            self.latitude = None
            self.longitude = None
            self.altitude = None


def _default_constellations() -> Dict[Constellation, ConstellationState]:
    return {c: ConstellationState(accuracy=DEFAULT_ACCURACY[c]) for c in Constellation}


# ---------------------------------------------------------------------------
# Fused output
# ---------------------------------------------------------------------------


@dataclass
class FusedPosition:
    """Position combined from one or more constellations.

    Attributes:
        latitude: Fused latitude in decimal degrees.
        longitude: Fused longitude in decimal degrees.
        altitude: Fused altitude in metres.
        horizontal_accuracy: Estimated horizontal accuracy in metres.
        vertical_accuracy: Estimated vertical accuracy in metres.
        contributing_constellations: Names of the constellations used, in
            canonical constellation order.
    """

    latitude: float
    longitude: float
    altitude: float
    horizontal_accuracy: float
    vertical_accuracy: float
    contributing_constellations: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "latitude": float(self.latitude),
            "longitude": float(self.longitude),
            "altitude": float(self.altitude),
            "horizontal_accuracy": float(self.horizontal_accuracy),
            "vertical_accuracy": float(self.vertical_accuracy),
            "contributing_constellations": list(self.contributing_constellations),
        }


# ---------------------------------------------------------------------------
# Receiver-wide state
# ---------------------------------------------------------------------------


@dataclass
class GlobalState:
    """Receiver-wide state.

    Attributes:
        time: UTC time string (``HHMMSS.ss``) of the last time-bearing
            sentence.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        altitude: Altitude above mean sea level in metres.
        fix_quality: Fix quality code (0 = invalid, 1 = GPS, 2 = DGPS, ...).
        num_satellites: Number of satellites used in the fix.
        speed_knots: Speed over ground in knots.
        track_angle: Track angle in degrees.
        date: Date string in ``DDMMYY`` format.
        constellations: One :class:`ConstellationState` per
            :class:`Constellation`.  The key set never changes.
        global_accuracy: Fused accuracy fallback in metres, used when no
            constellation is active.  Computed from the nominal accuracies
            of all constellations unless given.
        global_accuracy_overridden: ``True`` once the caller has set
            *global_accuracy* explicitly.
        fused_position: Result of the last fusion run; ``None`` means no fix.
    """

    time: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    fix_quality: Optional[int] = None
    num_satellites: Optional[int] = None
    speed_knots: Optional[float] = None
    track_angle: Optional[float] = None
    date: Optional[str] = None
    constellations: Dict[Constellation, ConstellationState] = field(
        default_factory=_default_constellations
    )
    global_accuracy: Optional[float] = None
    global_accuracy_overridden: bool = False
    fused_position: Optional[FusedPosition] = None

    def __post_init__(self) -> None:
        if self.global_accuracy is None:
            self.global_accuracy = combine_accuracies(
                s.accuracy for s in self.constellations.values()
            )

    def __getitem__(self, constellation: Constellation) -> ConstellationState:
        return self.constellations[constellation]
