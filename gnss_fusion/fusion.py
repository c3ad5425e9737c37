"""
fusion.py

Combination of the per-constellation fixes into one position estimate.

Two algorithms are provided.  Both select the eligible constellations,
report no fix when none qualifies, pass a single eligible constellation
straight through, and otherwise average the fixes with reciprocal weights
``1 / (accuracy + 0.1)``.  The additive term keeps the weight finite for a
reported DOP of zero.

* :func:`fuse_simple` weights by ``HDOP × nominal accuracy`` and reports the
  weighted mean of the member accuracies.
* :func:`fuse_advanced` weights by ``sqrt(HDOP² + PDOP²)`` and reports the
  weighted spread of the member fixes around the fused point.  This is a
  variance-weighted heuristic, not a recursive filter.

Both store their result in ``GlobalState.fused_position`` and return it.
Constellation state is never modified.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from gnss_fusion.accuracy import global_accuracy
from gnss_fusion.constellation import Constellation
from gnss_fusion.state import ConstellationState, FusedPosition, GlobalState

logger = logging.getLogger(__name__)

MIN_SATELLITES = 4
WEIGHT_GUARD = 0.1
VERTICAL_FACTOR = 1.5
MIN_ACCURACY = 1.0
# Equatorial approximation, applied at every latitude.
METRES_PER_DEGREE = 111000.0


@dataclass
class _Member:
    constellation: Constellation
    latitude: float
    longitude: float
    altitude: float
    horizontal: float
    vertical: float


# ---------------------------------------------------------------------------
# Member selection
# ---------------------------------------------------------------------------


def _simple_member(constellation: Constellation, system: ConstellationState) -> Optional[_Member]:
    if not system.has_position or system.hdop is None:
        return None
    if len(system.satellites_used) < MIN_SATELLITES:
        return None
    accuracy = system.accuracy
    vdop = system.vdop if system.vdop is not None else system.hdop * VERTICAL_FACTOR
    return _Member(
        constellation=constellation,
        latitude=system.latitude,
        longitude=system.longitude,
        altitude=system.altitude if system.altitude is not None else 0.0,
        horizontal=max(system.hdop * accuracy, accuracy),
        vertical=max(vdop * accuracy * VERTICAL_FACTOR, accuracy * VERTICAL_FACTOR),
    )


def _advanced_member(constellation: Constellation, system: ConstellationState) -> Optional[_Member]:
    if system.pdop is None:
        return None
    if _simple_member(constellation, system) is None:
        return None
    accuracy = system.accuracy
    pdop = system.pdop
    vdop = system.vdop if system.vdop is not None else pdop * 0.8
    return _Member(
        constellation=constellation,
        latitude=system.latitude,
        longitude=system.longitude,
        altitude=system.altitude if system.altitude is not None else 0.0,
        horizontal=max(math.sqrt(system.hdop ** 2 + pdop ** 2), accuracy),
        vertical=max(math.sqrt(vdop ** 2 + pdop ** 2), accuracy * VERTICAL_FACTOR),
    )


def _collect(
    state: GlobalState,
    select: Callable[[Constellation, ConstellationState], Optional[_Member]],
) -> List[_Member]:
    members = []
    for constellation in Constellation:
        member = select(constellation, state.constellations[constellation])
        if member is not None:
            members.append(member)
    return members


def _weighted_mean(values: np.ndarray, weights: np.ndarray) -> float:
    return float(np.sum(values * weights) / np.sum(weights))


def _names(members: List[_Member]) -> List[str]:
    return [m.constellation.value for m in members]


def _store(state: GlobalState, fused: Optional[FusedPosition], algorithm: str) -> Optional[FusedPosition]:
    state.fused_position = fused
    if fused is None:
        logger.debug("%s fusion: no eligible constellation", algorithm)
    else:
        logger.debug(
            "%s fusion: %s -> (%.7f, %.7f) ±%.2f m",
            algorithm,
            ",".join(fused.contributing_constellations),
            fused.latitude,
            fused.longitude,
            fused.horizontal_accuracy,
        )
    return fused


# ---------------------------------------------------------------------------
# Algorithms
# ---------------------------------------------------------------------------


def fuse_simple(state: GlobalState) -> Optional[FusedPosition]:
    """Fuse the eligible constellations with DOP-scaled accuracy weights.

    A constellation is eligible when it has latitude, longitude and HDOP and
    at least four satellites in its active list.

    Returns:
        The stored :class:`FusedPosition`, or ``None`` when no constellation
        is eligible.
    """
    members = _collect(state, _simple_member)
    if not members:
        return _store(state, None, "simple")

    if len(members) == 1:
        (member,) = members
        fused = FusedPosition(
            latitude=member.latitude,
            longitude=member.longitude,
            altitude=member.altitude,
            horizontal_accuracy=max(member.horizontal, MIN_ACCURACY),
            vertical_accuracy=max(member.vertical, MIN_ACCURACY),
            contributing_constellations=_names(members),
        )
        return _store(state, fused, "simple")

    floor = global_accuracy(state)
    latitudes = np.array([m.latitude for m in members], dtype=float)
    longitudes = np.array([m.longitude for m in members], dtype=float)
    altitudes = np.array([m.altitude for m in members], dtype=float)
    horizontal = np.array([m.horizontal for m in members], dtype=float)
    vertical = np.array([m.vertical for m in members], dtype=float)

    weights = 1.0 / (horizontal + WEIGHT_GUARD)
    altitude_weights = 1.0 / (vertical + WEIGHT_GUARD)

    horizontal_accuracy = max(_weighted_mean(horizontal, weights), floor)
    if np.sum(altitude_weights) > 0.0:
        altitude = _weighted_mean(altitudes, altitude_weights)
        vertical_accuracy = max(
            _weighted_mean(vertical, altitude_weights), floor * VERTICAL_FACTOR
        )
    else:
        altitude = 0.0
        vertical_accuracy = horizontal_accuracy * VERTICAL_FACTOR

    fused = FusedPosition(
        latitude=_weighted_mean(latitudes, weights),
        longitude=_weighted_mean(longitudes, weights),
        altitude=altitude,
        horizontal_accuracy=horizontal_accuracy,
        vertical_accuracy=vertical_accuracy,
        contributing_constellations=_names(members),
    )
    return _store(state, fused, "simple")


def fuse_advanced(state: GlobalState) -> Optional[FusedPosition]:
    """Fuse the eligible constellations using combined HDOP/PDOP weights.

    Eligibility is that of :func:`fuse_simple` plus a known PDOP.  The
    horizontal accuracy is the weighted RMS distance of the member fixes
    from the fused point, converted at 111 km per degree; the vertical
    accuracy is the weighted RMS altitude spread, or 1.5 times the
    horizontal figure when all member altitudes agree.  Both are floored at
    the global fused accuracy (1.5 times for vertical) and the horizontal
    figure at one metre.

    Returns:
        The stored :class:`FusedPosition`, or ``None`` when no constellation
        is eligible.
    """
    members = _collect(state, _advanced_member)
    if not members:
        return _store(state, None, "advanced")

    floor = global_accuracy(state)

    if len(members) == 1:
        (member,) = members
        fused = FusedPosition(
            latitude=member.latitude,
            longitude=member.longitude,
            altitude=member.altitude,
            horizontal_accuracy=max(member.horizontal, floor, MIN_ACCURACY),
            vertical_accuracy=max(member.vertical, floor * VERTICAL_FACTOR),
            contributing_constellations=_names(members),
        )
        return _store(state, fused, "advanced")

    latitudes = np.array([m.latitude for m in members], dtype=float)
    longitudes = np.array([m.longitude for m in members], dtype=float)
    altitudes = np.array([m.altitude for m in members], dtype=float)
    horizontal = np.array([m.horizontal for m in members], dtype=float)
    vertical = np.array([m.vertical for m in members], dtype=float)

    weights = 1.0 / (horizontal + WEIGHT_GUARD)
    altitude_weights = 1.0 / (vertical + WEIGHT_GUARD)

    latitude = _weighted_mean(latitudes, weights)
    longitude = _weighted_mean(longitudes, weights)

    spread = (latitudes - latitude) ** 2 + (longitudes - longitude) ** 2
    horizontal_variance = _weighted_mean(spread, weights)
    horizontal_accuracy = max(
        math.sqrt(horizontal_variance) * METRES_PER_DEGREE, floor, MIN_ACCURACY
    )

    # Compare the inputs: the weighted mean of equal altitudes may round off.
    if np.all(altitudes == altitudes[0]):
        altitude = float(altitudes[0])
        vertical_accuracy = horizontal_accuracy * VERTICAL_FACTOR
    else:
        altitude = _weighted_mean(altitudes, altitude_weights)
        vertical_variance = _weighted_mean((altitudes - altitude) ** 2, altitude_weights)
        vertical_accuracy = math.sqrt(vertical_variance)
    vertical_accuracy = max(vertical_accuracy, floor * VERTICAL_FACTOR)

    fused = FusedPosition(
        latitude=latitude,
        longitude=longitude,
        altitude=altitude,
        horizontal_accuracy=horizontal_accuracy,
        vertical_accuracy=vertical_accuracy,
        contributing_constellations=_names(members),
    )
    return _store(state, fused, "advanced")


ALGORITHMS = {
    "simple": fuse_simple,
    "advanced": fuse_advanced,
}
