"""
report.py

Plain-text status report of a :class:`~gnss_fusion.parser.MultiGnssParser`,
suitable for printing to a console after each sentence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from gnss_fusion.parser import MultiGnssParser

_RULE_WIDTH = 64


def format_report(parser: "MultiGnssParser") -> str:
    """Return a multi-line report of every constellation and the fused fix."""
    lines: List[str] = []
    for constellation, system in parser.constellations.items():
        name = constellation.value
        lines.append(f"System: {name} | Satellites: {system.satellites_in_view}")

        if system.has_position:
            position = f"System: {name} | Lat: {system.latitude:.6f}, Lon: {system.longitude:.6f}"
            if system.altitude is not None:
                position += f" | Alt: {system.altitude:.1f}m"
            lines.append(position)
        else:
            lines.append(f"System: {name} | Coordinates not available")

        if system.hdop is not None:
            dops = f"System: {name} | HDOP: {system.hdop:.2f}"
            if system.vdop is not None:
                dops += f" | VDOP: {system.vdop:.2f}"
            if system.pdop is not None:
                dops += f" | PDOP: {system.pdop:.2f}"
            dops += f" | Sys. Acc: {system.accuracy:.2f}m"
            lines.append(dops)

    fused = parser.fused_position
    if fused is None:
        lines.append("FUSED | Position not available")
    else:
        lines.append("┌─ FUSED POSITION DATA " + "─" * (_RULE_WIDTH - 22) + "┐")
        lines.append(f"│ Latitude:         {fused.latitude:.7f}°")
        lines.append(f"│ Longitude:        {fused.longitude:.7f}°")
        lines.append(f"│ Altitude:         {fused.altitude:.2f} m")
        lines.append(f"│ Horizontal Acc:   {fused.horizontal_accuracy:.2f} m")
        lines.append(f"│ Altitude Acc:     {fused.vertical_accuracy:.2f} m")
        lines.append(f"│ Contributing:     {', '.join(fused.contributing_constellations)}")
        lines.append("└" + "─" * _RULE_WIDTH + "┘")
    lines.append("---")
    return "\n".join(lines)
