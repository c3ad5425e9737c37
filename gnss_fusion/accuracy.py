"""
accuracy.py

Nominal accuracy of each constellation and the global fused accuracy derived
from them.

The global fused accuracy combines the nominal accuracies of the *active*
constellations (satellites in view and a known latitude/longitude) as a
root-sum-of-squares of their information::

    sigma = 1 / sqrt(sum(1 / sigma_i ** 2))

When no constellation is active the stored fallback is returned.  The
fallback is the combination over all constellations until the caller
overrides it with :func:`set_global_accuracy`.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable, List, Optional

import numpy as np

from gnss_fusion.constellation import Constellation

if TYPE_CHECKING:
    from gnss_fusion.state import ConstellationState, GlobalState


def combine_accuracies(accuracies: Iterable[float]) -> float:
    """Combine independent accuracies (metres) into a single figure.

    Raises:
        ValueError: If *accuracies* is empty.
    """
    values = np.asarray(list(accuracies), dtype=float)
    if values.size == 0:
        raise ValueError("At least one accuracy value is required.")
    return float(1.0 / np.sqrt(np.sum(1.0 / values ** 2)))


def is_active(system: "ConstellationState") -> bool:
    """Return ``True`` when *system* has satellites in view and a position."""
    return bool(system.satellites_info) and system.has_position


def active_constellations(state: "GlobalState") -> List[Constellation]:
    return [c for c, s in state.constellations.items() if is_active(s)]


def global_accuracy(state: "GlobalState") -> float:
    """Current global fused accuracy in metres."""
    active = [state.constellations[c].accuracy for c in active_constellations(state)]
    if not active:
        return state.global_accuracy
    return combine_accuracies(active)


def get_constellation_accuracy(state: "GlobalState", name: object) -> Optional[float]:
    """Nominal accuracy of constellation *name*, or ``None`` if unknown."""
    constellation = Constellation.from_name(name)
    if constellation is None:
        return None
    return state.constellations[constellation].accuracy


def set_constellation_accuracy(state: "GlobalState", name: object, metres: float) -> bool:
    """Set the nominal accuracy of constellation *name*.

    Returns ``False`` (and changes nothing) for an unknown constellation or a
    value that is not a positive finite number.
    """
    constellation = Constellation.from_name(name)
    if constellation is None or not _valid_accuracy(metres):
        return False
    state.constellations[constellation].accuracy = float(metres)
    if not state.global_accuracy_overridden:
        state.global_accuracy = combine_accuracies(
            s.accuracy for s in state.constellations.values()
        )
    return True


def set_global_accuracy(state: "GlobalState", metres: float) -> bool:
    """Override the global fused accuracy fallback."""
    if not _valid_accuracy(metres):
        return False
    state.global_accuracy = float(metres)
    state.global_accuracy_overridden = True
    return True


def _valid_accuracy(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0
