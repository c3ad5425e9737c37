"""
nmea/serial_source.py

Line source reading NMEA sentences from a receiver on a serial port.

Example::

    parser = MultiGnssParser()
    with SerialNmeaSource("/dev/ttyUSB0", baudrate=9600) as source:
        for fused in parser.follow(source.sentences()):
            print(fused)
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

import serial

logger = logging.getLogger(__name__)


class SerialNmeaSource:
    """NMEA sentence source backed by :class:`serial.Serial`.

    The port is configured for 8 data bits, no parity and one stop bit.

    Args:
        port: Serial device name (``"/dev/ttyUSB0"``, ``"COM12"``, ...).
        baudrate: Line speed in baud.
        timeout: Read timeout in seconds.  A read that times out yields
            nothing and reading continues.
    """

    def __init__(self, port: str, baudrate: int = 9600, timeout: float = 1.0) -> None:
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self._serial: Optional[serial.Serial] = None

    def open(self) -> None:
        """Open the port.

        Raises:
            serial.SerialException: If the port cannot be opened.
        """
        if self.is_open:
            return
        self._serial = serial.Serial(
            port=self.port,
            baudrate=self.baudrate,
            timeout=self.timeout,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
        )
        logger.debug("Opened %s at %d baud", self.port, self.baudrate)

    def close(self) -> None:
        if self._serial is not None and self._serial.is_open:
            self._serial.close()
            logger.debug("Closed %s", self.port)
        self._serial = None

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def __enter__(self) -> "SerialNmeaSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def sentences(self) -> Iterator[str]:
        """Yield newline-stripped ``$`` sentences until the port fails or closes.

        ``readline`` returns whatever has arrived when the timeout expires,
        so unterminated bytes are held back until the rest of the line is
        read.
        """
        pending = b""
        while self.is_open:
            try:
                raw = self._serial.readline()
            except serial.SerialException as e:
                logger.error("Serial port error on %s: %s", self.port, e)
                return
            if not raw:
                continue
            pending += raw
            if not pending.endswith(b"\n"):
                continue
            line = pending.decode("ascii", errors="replace").strip()
            pending = b""
            if line.startswith("$"):
                yield line
