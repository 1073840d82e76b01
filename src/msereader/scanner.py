"""Line-at-a-time reading of UTF-8 text from a binary stream.

The scanner never looks further ahead than the bytes already buffered for
the current line, plus a single byte after a ``\\r`` to recognise ``\\r\\n``.
"""
from __future__ import annotations

import logging
import re
from typing import BinaryIO, Optional

from .errors import ParseError

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"
DEFAULT_CHUNK_SIZE = 1024

_CR = 0x0D
_LF = 0x0A
_TERMINATOR = re.compile(rb"[\r\n]")


class LineScanner:
    """Split a byte stream into logical lines.

    ``\\n``, ``\\r`` and ``\\r\\n`` each end a line. The stream is read in
    chunks of ``chunk_size`` bytes into one reusable buffer, so ordinary lines
    are sliced out of memory that is already allocated and only lines longer
    than the buffer make it grow.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._stream = stream
        self._chunk_size = chunk_size
        self._buffer = bytearray()
        self._pos = 0
        self._exhausted = False
        self._started = False
        self.lines_read = 0

    @property
    def exhausted(self) -> bool:
        """True once the stream is drained and no buffered bytes remain."""
        return self._exhausted and self._pos >= len(self._buffer)

    def _fill(self) -> bool:
        if self._exhausted:
            return False
        chunk = self._stream.read(self._chunk_size)
        if not chunk:
            self._exhausted = True
            return False
        self._buffer += chunk
        return True

    def eat_bom(self) -> bool:
        """Consume a UTF-8 byte order mark at the very start of the stream."""
        if self._started:
            return False
        self._started = True
        while len(self._buffer) - self._pos < len(UTF8_BOM) and self._fill():
            pass
        if self._buffer.startswith(UTF8_BOM, self._pos):
            self._pos += len(UTF8_BOM)
            logger.debug("Skipped UTF-8 byte order mark")
            return True
        return False

    def next_line(self) -> Optional[str]:
        """Return the next line without its terminator, or None at end of stream."""
        self._started = True
        if self._pos:
            del self._buffer[: self._pos]
            self._pos = 0

        search = 0
        match = _TERMINATOR.search(self._buffer, search)
        while match is None:
            search = len(self._buffer)
            if not self._fill():
                break
            match = _TERMINATOR.search(self._buffer, search)

        if match is None:
            if not self._buffer:
                return None
            raw = bytes(self._buffer)
            self._pos = len(self._buffer)
        else:
            end = match.start()
            raw = bytes(self._buffer[:end])
            after = end + 1
            if self._buffer[end] == _CR:
                # \r alone, or \r\n; the byte after \r may not be buffered yet
                if after >= len(self._buffer):
                    self._fill()
                if after < len(self._buffer) and self._buffer[after] == _LF:
                    after += 1
            self._pos = after

        self.lines_read += 1
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError("Invalid UTF-8 sequence", self.lines_read) from e
