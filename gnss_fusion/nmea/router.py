"""
nmea/router.py

Dispatch of raw NMEA lines to the sentence decoders.

The five-character sentence identifier (talker + type) selects a decoder and,
for per-constellation sentences, the constellation it targets:

=========  =========  ==========
Talker     Type       Target
=========  =========  ==========
GN         GGA        all
GN         RMC        all
GN         VTG        global
GN         GSA        by PRN
GP/GL/GA   GSV        GPS / GLONASS / GALILEO
BD         GSV        BEIDOU
GP/GL/GA   GLL        GPS / GLONASS / GALILEO
BD         GLL        BEIDOU
=========  =========  ==========

Lines with an unknown or too-short identifier are dropped silently.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from gnss_fusion.constellation import Constellation
from gnss_fusion.nmea.sentences import (
    decode_gga,
    decode_gll,
    decode_gsa,
    decode_gsv,
    decode_rmc,
    decode_vtg,
)
from gnss_fusion.state import GlobalState

SENTINEL = "$"
IDENTIFIER_LENGTH = 5

Decoder = Callable[..., None]

SENTENCE_TABLE: Dict[str, Tuple[Decoder, Optional[Constellation]]] = {
    "GNGGA": (decode_gga, None),
    "GNRMC": (decode_rmc, None),
    "GNVTG": (decode_vtg, None),
    "GNGSA": (decode_gsa, None),
    "GPGSV": (decode_gsv, Constellation.GPS),
    "GLGSV": (decode_gsv, Constellation.GLONASS),
    "GAGSV": (decode_gsv, Constellation.GALILEO),
    "BDGSV": (decode_gsv, Constellation.BEIDOU),
    "GPGLL": (decode_gll, Constellation.GPS),
    "GLGLL": (decode_gll, Constellation.GLONASS),
    "GAGLL": (decode_gll, Constellation.GALILEO),
    "BDGLL": (decode_gll, Constellation.BEIDOU),
}


def split_sentence(line: str) -> List[str]:
    """Strip one leading ``$`` and split the sentence on commas."""
    if line.startswith(SENTINEL):
        line = line[len(SENTINEL):]
    return line.split(",")


def sentence_identifier(fields: Sequence[str]) -> Optional[str]:
    """Return the five-character identifier, or ``None`` if it is too short."""
    if not fields or len(fields[0]) < IDENTIFIER_LENGTH:
        return None
    return fields[0][:IDENTIFIER_LENGTH]


def route_sentence(state: GlobalState, line: str) -> bool:
    """Decode *line* into *state*.

    Returns:
        ``True`` if the sentence was recognised and decoded, ``False`` if it
        was dropped.
    """
    fields = split_sentence(line)
    entry = SENTENCE_TABLE.get(sentence_identifier(fields) or "")
    if entry is None:
        return False
    decoder, constellation = entry
    if constellation is None:
        decoder(state, fields)
    else:
        decoder(state, fields, constellation)
    return True
