"""
nmea/log.py

Reader for recorded NMEA 0183 log files (one sentence per line).

Receiver captures often carry boot banners, logger timestamps or comment
lines between sentences.  Only lines starting with ``$`` are returned; the
rest are counted in :attr:`NmeaLogReader.skipped` and otherwise ignored.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, List

logger = logging.getLogger(__name__)


class NmeaLogReader:
    """Sentence source over a recorded NMEA capture.

    Args:
        path: Path to the ``.nmea`` or ``.txt`` capture.

    Raises:
        FileNotFoundError: If *path* does not exist.

    Example::

        reader = NmeaLogReader("receiver.nmea")
        parser.feed_lines(reader.sentences())
        print(reader.skipped, "non-sentence lines")
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        if not self.path.is_file():
            raise FileNotFoundError(f"NMEA capture not found: {self.path}")
        self.skipped = 0

    def sentences(self) -> Iterator[str]:
        """Yield each ``$`` line with surrounding whitespace removed.

        Blank lines are dropped silently; any other non-sentence line
        increments :attr:`skipped`.  The counter restarts on every call.
        """
        self.skipped = 0
        with self.path.open("r", encoding="ascii", errors="replace") as capture:
            for number, raw in enumerate(capture, start=1):
                line = raw.strip()
                if not line:
                    continue
                if line.startswith("$"):
                    yield line
                else:
                    self.skipped += 1
                    logger.debug("%s:%d: not an NMEA sentence, skipped", self.path, number)

    def read(self) -> List[str]:
        """Return every sentence in the capture as a list."""
        return list(self.sentences())
