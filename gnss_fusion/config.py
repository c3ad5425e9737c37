"""
config.py

Fusion configuration: nominal accuracy per constellation, an optional global
accuracy override and the default fusion algorithm.  The configuration can
be loaded from and saved to YAML files::

    accuracies:
      GPS: 2.0
      GLONASS: 4.0
      GALILEO: 3.0
      BEIDOU: 3.0
    global_accuracy: null
    algorithm: advanced
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional

import yaml

from gnss_fusion.constellation import DEFAULT_ACCURACY, Constellation

if TYPE_CHECKING:
    from gnss_fusion.parser import MultiGnssParser

logger = logging.getLogger(__name__)

ALGORITHM_NAMES = ("simple", "advanced")


def _default_accuracies() -> Dict[str, float]:
    return {c.value: DEFAULT_ACCURACY[c] for c in Constellation}


@dataclass
class FusionConfig:
    """Accuracy and algorithm settings for a :class:`MultiGnssParser`.

    Attributes:
        accuracies: Nominal accuracy in metres keyed by constellation name.
        global_accuracy: Optional override of the global fused accuracy
            fallback in metres.
        algorithm: Default fusion algorithm, ``"simple"`` or ``"advanced"``.
    """

    accuracies: Dict[str, float] = field(default_factory=_default_accuracies)
    global_accuracy: Optional[float] = None
    algorithm: str = "advanced"

    def __post_init__(self) -> None:
        normalised: Dict[str, float] = {}
        for name, value in self.accuracies.items():
            constellation = Constellation.from_name(name)
            if constellation is None:
                raise ValueError(
                    f"Unknown constellation '{name}'. "
                    f"Available: {[c.value for c in Constellation]}"
                )
            normalised[constellation.value] = _positive(value, f"accuracy of {constellation.value}")
        self.accuracies = normalised
        if self.global_accuracy is not None:
            self.global_accuracy = _positive(self.global_accuracy, "global_accuracy")
        if self.algorithm not in ALGORITHM_NAMES:
            raise ValueError(
                f"Unknown fusion algorithm '{self.algorithm}'. "
                f"Expected one of {list(ALGORITHM_NAMES)}"
            )

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def apply(self, parser: "MultiGnssParser") -> None:
        """Push the configured accuracies into *parser*."""
        for name, metres in self.accuracies.items():
            parser.set_constellation_accuracy(name, metres)
        if self.global_accuracy is not None:
            parser.set_global_accuracy(self.global_accuracy)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "accuracies": {name: float(v) for name, v in self.accuracies.items()},
            "global_accuracy": None if self.global_accuracy is None else float(self.global_accuracy),
            "algorithm": self.algorithm,
        }

    def to_yaml(self, path: str | os.PathLike) -> None:
        """Write the configuration to a YAML file."""
        Path(path).write_text(yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False))

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "FusionConfig":
        """Build a configuration, filling unset accuracies with the defaults.

        Raises:
            ValueError: If *data* or its ``accuracies`` entry is not a mapping,
                or any value is invalid.
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Fusion config must be a mapping, got {type(data).__name__}")
        overrides = data.get("accuracies") or {}
        if not isinstance(overrides, dict):
            raise ValueError(
                f"'accuracies' must be a mapping, got {type(overrides).__name__}"
            )
        accuracies = _default_accuracies()
        accuracies.update(overrides)
        return cls(
            accuracies=accuracies,
            global_accuracy=data.get("global_accuracy"),
            algorithm=data.get("algorithm", "advanced"),
        )

    @classmethod
    def from_yaml(cls, path: str | os.PathLike) -> "FusionConfig":
        """Load a configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Fusion config file not found: {path}")
        config = cls.from_dict(yaml.safe_load(path.read_text()))
        logger.debug("Loaded fusion config from %s: %s", path, config)
        return config


def _positive(value: object, what: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{what} must be a number, got {value!r}") from None
    if not math.isfinite(number) or number <= 0:
        raise ValueError(f"{what} must be positive, got {value!r}")
    return number
