"""
nmea/sentences.py

Decoders for the NMEA 0183 sentence types understood by the receiver.

Supported sentence types
------------------------
* **GGA** – Fix data: time, position, fix quality, satellites used, altitude.
* **RMC** – Recommended minimum: time, position, speed, track angle, date.
* **VTG** – Course and speed over ground (speed in knots only).
* **GLL** – Geographic position for one constellation.
* **GSA** – Active satellites and PDOP/HDOP/VDOP.
* **GSV** – Satellites in view for one constellation.

Each decoder receives the comma-split sentence (identifier at index ``0``)
and mutates a :class:`~gnss_fusion.state.GlobalState` in place.  Missing or
unparsable fields become ``None``; nothing here raises on bad input.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from gnss_fusion.constellation import Constellation, classify_prn
from gnss_fusion.nmea.fields import (
    field_at,
    first_numbers,
    parse_coordinate,
    parse_float,
    parse_int,
    parse_text,
    parse_uint,
    strip_checksum,
)
from gnss_fusion.state import GlobalState, SatelliteInfo

# GSA: $GNGSA,mode,fix,prn1,...,prn12,pdop,hdop,vdop*hh
GSA_PRN_FIRST = 3
GSA_PRN_COUNT = 12
# GSV: $GPGSV,total,index,in_view,prn,elev,azim,snr,...*hh
GSV_FIRST_SATELLITE = 4
GSV_GROUP_SIZE = 4


def _coordinates(fields: Sequence[str], first: int) -> Tuple[Optional[float], Optional[float]]:
    latitude = parse_coordinate(field_at(fields, first), field_at(fields, first + 1))
    longitude = parse_coordinate(field_at(fields, first + 2), field_at(fields, first + 3))
    return latitude, longitude


# ---------------------------------------------------------------------------
# Position-bearing sentences
# ---------------------------------------------------------------------------


def decode_gga(state: GlobalState, fields: Sequence[str]) -> None:
    """Decode a GGA (fix data) sentence."""
    # GGA: $GNGGA,hhmmss.ss,llll.ll,a,yyyyy.yy,a,q,nn,h.h,alt,M,geoid,M,,*hh
    latitude, longitude = _coordinates(fields, 2)
    altitude = parse_float(field_at(fields, 9))

    state.time = parse_text(field_at(fields, 1))
    state.latitude = latitude
    state.longitude = longitude
    state.fix_quality = parse_uint(field_at(fields, 6), bits=8)
    state.num_satellites = parse_uint(field_at(fields, 7), bits=8)
    state.altitude = altitude

    for system in state.constellations.values():
        system.update_position(latitude, longitude, altitude, with_altitude=True)


def decode_rmc(state: GlobalState, fields: Sequence[str]) -> None:
    """Decode an RMC (recommended minimum) sentence."""
    # RMC: $GNRMC,hhmmss.ss,A,llll.ll,a,yyyyy.yy,a,speed,track,ddmmyy,...*hh
    latitude, longitude = _coordinates(fields, 3)

    state.time = parse_text(field_at(fields, 1))
    state.latitude = latitude
    state.longitude = longitude
    state.speed_knots = parse_float(field_at(fields, 7))
    state.track_angle = parse_float(field_at(fields, 8))
    state.date = parse_text(field_at(fields, 9))

    for system in state.constellations.values():
        system.update_position(latitude, longitude)


def decode_gll(state: GlobalState, fields: Sequence[str], constellation: Constellation) -> None:
    """Decode a GLL (geographic position) sentence for *constellation*."""
    # GLL: $GPGLL,llll.ll,a,yyyyy.yy,a,hhmmss.ss,A*hh
    latitude, longitude = _coordinates(fields, 1)
    state.latitude = latitude
    state.longitude = longitude
    state.constellations[constellation].update_position(latitude, longitude)


def decode_vtg(state: GlobalState, fields: Sequence[str]) -> None:
    """Decode a VTG (course/speed) sentence; only the knots field is used."""
    # VTG: $GNVTG,track,T,track_mag,M,speed_knots,N,speed_kmh,K*hh
    state.speed_knots = parse_float(field_at(fields, 5))


# ---------------------------------------------------------------------------
# Satellite sentences
# ---------------------------------------------------------------------------


def decode_gsa(state: GlobalState, fields: Sequence[str]) -> None:
    """Decode a GSA (active satellites) sentence.

    PRNs are attributed to constellations by numeric range and appended to
    their ``satellites_used`` lists.  The PDOP/HDOP/VDOP triple that follows
    the PRN window is applied only to the constellations that received at
    least one PRN from this sentence.
    """
    touched: List[Constellation] = []
    for index in range(GSA_PRN_FIRST, GSA_PRN_FIRST + GSA_PRN_COUNT):
        prn = parse_int(field_at(fields, index))
        if prn is None:
            continue
        constellation = classify_prn(prn)
        if constellation is None:
            continue
        state.constellations[constellation].satellites_used.append(prn)
        if constellation not in touched:
            touched.append(constellation)

    dops = first_numbers(fields, GSA_PRN_FIRST + GSA_PRN_COUNT, 3)
    pdop, hdop, vdop = _pad(dops, 3)

    for constellation in touched:
        system = state.constellations[constellation]
        system.pdop = pdop
        system.hdop = hdop
        system.vdop = vdop


def decode_gsv(state: GlobalState, fields: Sequence[str], constellation: Constellation) -> None:
    """Decode a GSV (satellites in view) sentence for *constellation*.

    Each complete group of four fields (PRN, elevation, azimuth, SNR) is
    stored under its PRN, replacing any earlier report.  Groups whose PRN is
    unparsable are skipped.
    """
    satellites = state.constellations[constellation].satellites_info
    index = GSV_FIRST_SATELLITE
    while index + GSV_GROUP_SIZE - 1 < len(fields):
        prn = parse_uint(fields[index], bits=16)
        if prn is not None:
            satellites[prn] = SatelliteInfo(
                prn=prn,
                elevation=parse_uint(fields[index + 1], bits=8),
                azimuth=parse_uint(fields[index + 2], bits=16),
                snr=parse_uint(strip_checksum(fields[index + 3]), bits=8),
            )
        index += GSV_GROUP_SIZE


def _pad(values: List[float], size: int) -> List[Optional[float]]:
    padded: List[Optional[float]] = list(values)
    padded.extend([None] * (size - len(padded)))
    return padded
