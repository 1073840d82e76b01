from __future__ import annotations

from typing import Optional


class ReaderError(Exception):
    """Base error for msereader exceptions."""


class ParseError(ReaderError):
    """Raised when a document cannot be read any further.

    Fatal errors abort the whole read; recoverable problems are recorded as
    warnings on the reader instead.
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.message = message
        self.line_number = line_number
        location = f" on line {line_number}" if line_number is not None else ""
        super().__init__(f"{message}{location}")


class FileParseError(ParseError):
    """A ParseError attributed to a named file."""

    def __init__(self, message: str, filename: str, line_number: Optional[int] = None):
        self.filename = filename
        super().__init__(message, line_number)
        self.args = (f"{filename}: {self.args[0]}",)


class InternalError(ReaderError):
    """Raised when the reader API is used incorrectly."""


class ReaderStateError(InternalError):
    """Raised on an invalid cursor transition (e.g. reading a value twice)."""
