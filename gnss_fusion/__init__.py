"""
gnss_fusion: NMEA decoding for multi-constellation GNSS receivers and fusion
of the per-constellation fixes into a single position estimate.
"""

from gnss_fusion.constellation import Constellation, DEFAULT_ACCURACY, classify_prn
from gnss_fusion.state import SatelliteInfo, ConstellationState, GlobalState, FusedPosition
from gnss_fusion.config import FusionConfig
from gnss_fusion.parser import MultiGnssParser, load_nmea
from gnss_fusion.report import format_report
from gnss_fusion import nmea

__all__ = [
    "Constellation",
    "DEFAULT_ACCURACY",
    "classify_prn",
    "SatelliteInfo",
    "ConstellationState",
    "GlobalState",
    "FusedPosition",
    "FusionConfig",
    "MultiGnssParser",
    "load_nmea",
    "format_report",
    "nmea",
]
