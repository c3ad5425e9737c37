"""
gnss_fusion.nmea

NMEA 0183 sentence decoding, routing and line sources.
"""

from gnss_fusion.nmea.fields import parse_coordinate
from gnss_fusion.nmea.log import NmeaLogReader
from gnss_fusion.nmea.router import SENTENCE_TABLE, route_sentence
from gnss_fusion.nmea.serial_source import SerialNmeaSource

__all__ = [
    "parse_coordinate",
    "NmeaLogReader",
    "SENTENCE_TABLE",
    "route_sentence",
    "SerialNmeaSource",
]
