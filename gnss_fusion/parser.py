"""
parser.py

:class:`MultiGnssParser` is the entry point of the package: it owns the
receiver state, accepts NMEA sentences one line at a time and runs the
fusion algorithms on demand.

Example::

    parser = MultiGnssParser()
    parser.feed("$GNGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47")
    fused = parser.fuse_simple()
    if fused is not None:
        print(fused.latitude, fused.longitude, fused.horizontal_accuracy)

The parser is synchronous and holds no locks; callers sharing one instance
between threads must synchronise access themselves.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Iterator, List, Optional

from gnss_fusion import accuracy
from gnss_fusion.config import FusionConfig
from gnss_fusion.constellation import Constellation
from gnss_fusion.fusion import ALGORITHMS, fuse_advanced, fuse_simple
from gnss_fusion.nmea.log import NmeaLogReader
from gnss_fusion.nmea.router import route_sentence
from gnss_fusion.state import ConstellationState, FusedPosition, GlobalState


class MultiGnssParser:
    """Multi-constellation NMEA parser with position fusion.

    Args:
        config: Optional :class:`FusionConfig` applied on construction.
            Defaults to the built-in nominal accuracies and the advanced
            algorithm.
    """

    def __init__(self, config: Optional[FusionConfig] = None) -> None:
        self._state = GlobalState()
        self._config = config or FusionConfig()
        self._config.apply(self)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def feed(self, line: str) -> None:
        """Decode one NMEA sentence.

        Unrecognised or malformed sentences are ignored.
        """
        route_sentence(self._state, line)

    def feed_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.feed(line)

    def follow(
        self, lines: Iterable[str], algorithm: Optional[str] = None
    ) -> Iterator[Optional[FusedPosition]]:
        """Feed *lines* one by one, fusing after each.

        Yields:
            The fused position after every sentence (``None`` when there is
            no fix).
        """
        for line in lines:
            self.feed(line)
            yield self.fuse(algorithm)

    # ------------------------------------------------------------------
    # Fusion
    # ------------------------------------------------------------------

    def fuse_simple(self) -> Optional[FusedPosition]:
        return fuse_simple(self._state)

    def fuse_advanced(self) -> Optional[FusedPosition]:
        return fuse_advanced(self._state)

    def fuse(self, algorithm: Optional[str] = None) -> Optional[FusedPosition]:
        """Run *algorithm* (default: the configured one).

        Raises:
            ValueError: If *algorithm* is not ``"simple"`` or ``"advanced"``.
        """
        name = algorithm or self._config.algorithm
        if name not in ALGORITHMS:
            raise ValueError(
                f"Unknown fusion algorithm '{name}'. Expected one of {list(ALGORITHMS)}"
            )
        return ALGORITHMS[name](self._state)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> GlobalState:
        return self._state

    @property
    def config(self) -> FusionConfig:
        return self._config

    @property
    def fused_position(self) -> Optional[FusedPosition]:
        """Result of the last fusion run, ``None`` if there was no fix."""
        return self._state.fused_position

    @property
    def constellations(self) -> Dict[Constellation, ConstellationState]:
        return self._state.constellations

    def constellation(self, name: object) -> Optional[ConstellationState]:
        """Return the state of constellation *name*, or ``None`` if unknown."""
        constellation = Constellation.from_name(name)
        if constellation is None:
            return None
        return self._state.constellations[constellation]

    # ------------------------------------------------------------------
    # Accuracy
    # ------------------------------------------------------------------

    def get_constellation_accuracy(self, name: object) -> Optional[float]:
        return accuracy.get_constellation_accuracy(self._state, name)

    def set_constellation_accuracy(self, name: object, metres: float) -> bool:
        """Set the nominal accuracy of a constellation.

        Returns ``False`` for an unknown constellation name or a value that
        is not a positive number.
        """
        return accuracy.set_constellation_accuracy(self._state, name, metres)

    @property
    def global_accuracy(self) -> float:
        """Global fused accuracy in metres over the active constellations."""
        return accuracy.global_accuracy(self._state)

    def set_global_accuracy(self, metres: float) -> bool:
        return accuracy.set_global_accuracy(self._state, metres)

    @property
    def active_constellations(self) -> List[str]:
        return [c.value for c in accuracy.active_constellations(self._state)]


def load_nmea(path: str | os.PathLike, config: Optional[FusionConfig] = None) -> MultiGnssParser:
    """Replay an NMEA log file into a new parser.

    Args:
        path: Path to the ``.nmea`` or ``.txt`` log.
        config: Optional fusion configuration.

    Returns:
        The parser after every sentence in the file has been fed.
    """
    parser = MultiGnssParser(config)
    parser.feed_lines(NmeaLogReader(path).sentences())
    return parser
