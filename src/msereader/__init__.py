"""Reader for indentation-structured record documents.

This package provides:
- A line scanner that splits UTF-8 byte streams into logical lines
- A line parser computing indentation, key and value of each line
- A block cursor (state machine) that turns indentation into nesting
- Typed value coercion with recoverable warnings and fatal parse errors
- Enumeration decoding against caller-supplied names
- Versioned documents via the reserved ``mse_version`` block

The writer, the container format and the application object model are not
part of this package; they are driven through the Reader API.
"""

from .coercion import Coerced, LocalFileName, Point, ValueKind, coerce
from .config import ReaderSettings
from .cursor import BlockCursor, CursorState
from .diagnostics import Diagnostic, DiagnosticsLog
from .enum_reader import EnumReader
from .errors import (
    FileParseError,
    InternalError,
    ParseError,
    ReaderError,
    ReaderStateError,
)
from .line_parser import ParsedLine, canonical_name_form, parse_line
from .messages import MessageQueue, MessageType
from .reader import Reader, Reflectable, lookup, open_reader, read_document
from .scanner import LineScanner
from .version import Version

__version__ = "0.1.0"

__all__ = [
    "BlockCursor",
    "Coerced",
    "CursorState",
    "Diagnostic",
    "DiagnosticsLog",
    "EnumReader",
    "FileParseError",
    "InternalError",
    "LineScanner",
    "LocalFileName",
    "MessageQueue",
    "MessageType",
    "ParseError",
    "ParsedLine",
    "Point",
    "Reader",
    "ReaderError",
    "ReaderSettings",
    "ReaderStateError",
    "Reflectable",
    "ValueKind",
    "Version",
    "canonical_name_form",
    "coerce",
    "lookup",
    "open_reader",
    "parse_line",
    "read_document",
]
