"""
Byte-offset tailing of a single log file.

The reader starts at end-of-file so that content written before the watchdog
started is never reported, and only moves past lines that end in a newline.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from log_watchdog.errors import LogReadError

logger = logging.getLogger(__name__)

__all__ = ["TailReader"]

LINE_TERMINATOR = b"\n"


class TailReader:
    """
    Extract whole lines appended to a file since the last read.

    The file handle and offset are owned by this instance and are never
    shared. The offset counts bytes, including terminators, so a CRLF line
    advances it by the full two-byte terminator even though only the text
    before the ``\\r`` is reported.
    """

    def __init__(self, path: Path | str, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        try:
            self._file: BinaryIO | None = open(self.path, "rb")
            self._offset = self._file.seek(0, 2)
        except OSError as e:
            raise LogReadError(f"cannot open log file {self.path}: {e}") from e
        logger.debug(f"Tailing {self.path} from offset {self._offset}")

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def closed(self) -> bool:
        return self._file is None

    def iter_lines(self) -> Iterator[str]:
        """
        Yield complete lines appended since the last successful read.

        The offset moves past a line only once the consumer asks for the next
        one, so breaking out of the loop leaves the unconsumed line unread.

        Raises:
            LogReadError: If the file can no longer be read
        """
        data = self._read_tail()
        start = 0
        while True:
            end = data.find(LINE_TERMINATOR, start)
            if end == -1:
                break
            raw = data[start:end]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
            yield raw.decode(self.encoding, errors="replace")
            self._offset += end + 1 - start
            start = end + 1

    def poll(self) -> list[str]:
        """Return all complete lines appended since the last read, in file order."""
        return list(self.iter_lines())

    def _read_tail(self) -> bytes:
        if self._file is None:
            raise LogReadError(f"log file {self.path} is closed")
        try:
            self._file.seek(self._offset)
            return self._file.read()
        except OSError as e:
            raise LogReadError(f"cannot read log file {self.path}: {e}") from e

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> TailReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
