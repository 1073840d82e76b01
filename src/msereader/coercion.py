"""Conversion of raw document text into typed values.

Every kind goes through :func:`coerce` so the policy of what is a warning and
what is fatal lives in one table. Recoverable problems come back as
``Coerced.warning`` together with a substitute value; unrecoverable ones
raise :class:`~msereader.errors.ParseError`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

from .errors import ParseError


class ValueKind(str, Enum):
    TEXT = "text"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    TRIBOOL = "tribool"
    DATETIME = "datetime"
    POINT = "point"
    FILENAME = "filename"


class Point(NamedTuple):
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class LocalFileName:
    """Reference to a file stored next to (or inside) the document's package."""

    path: str = ""

    @classmethod
    def from_read_string(cls, text: str) -> "LocalFileName":
        return cls(text.strip().replace("\\", "/"))

    def __str__(self) -> str:
        return self.path

    def __bool__(self) -> bool:
        return bool(self.path)


@dataclass(frozen=True)
class Coerced:
    value: Any
    warning: Optional[str] = None


TRUE_TOKENS = ("true", "1", "yes")
FALSE_TOKENS = ("false", "0", "no")

DATETIME_FORMATS: Tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%Y/%m/%d %H:%M:%S",
    "%d %B %Y %H:%M:%S",
    "%a %b %d %H:%M:%S %Y",
    "%c",
    "%x %X",
    "%x",
)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
_FLOAT = re.compile(_DECIMAL + r"|[+-]?(?:inf(?:inity)?|nan)", re.IGNORECASE)
_POINT = re.compile(r"\(\s*(" + _DECIMAL + r")(?:,\s*(" + _DECIMAL + r"))?")

# value ranges of the C long and unsigned int the format was defined with
LONG_MIN = -(2**63)
LONG_MAX = 2**63 - 1
UINT_MAX = 2**32 - 1


def _parse_long(text: str) -> Optional[int]:
    if not _INTEGER.fullmatch(text):
        return None
    number = int(text)
    if not LONG_MIN <= number <= LONG_MAX:
        return None
    return number


def _coerce_text(text: str, current: Any) -> Coerced:
    return Coerced(text)


def _coerce_int(text: str, current: Any) -> Coerced:
    number = _parse_long(text)
    if number is None:
        return Coerced(0, f"Expected integer instead of '{text}'")
    return Coerced(number)


def _coerce_uint(text: str, current: Any) -> Coerced:
    number = _parse_long(text)
    if number is None or abs(number) > UINT_MAX:
        return Coerced(0, f"Expected non-negative integer instead of '{text}'")
    if number < 0:
        return Coerced(abs(number), f"Expected non-negative integer instead of {number}")
    return Coerced(number)


def _coerce_float(text: str, current: Any) -> Coerced:
    if not _FLOAT.fullmatch(text):
        return Coerced(current, f"Expected floating point number instead of '{text}'")
    return Coerced(float(text))


def _coerce_bool(text: str, current: Any) -> Coerced:
    if text in TRUE_TOKENS:
        return Coerced(True)
    if text in FALSE_TOKENS:
        return Coerced(False)
    return Coerced(current, f"Expected boolean ('true' or 'false') instead of '{text}'")


def _coerce_tribool(text: str, current: Any) -> Coerced:
    return _coerce_bool(text, current)


def parse_datetime(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ParseError("Expected a date and time")


def _coerce_datetime(text: str, current: Any) -> Coerced:
    return Coerced(parse_datetime(text))


def _coerce_point(text: str, current: Any) -> Coerced:
    m = _POINT.match(text)
    if m is None:
        raise ParseError("Expected (x,y)")
    x, y = m.groups()
    if y is None:
        previous = current if isinstance(current, tuple) and len(current) == 2 else Point()
        return Coerced(Point(float(x), float(previous[1])))
    return Coerced(Point(float(x), float(y)))


def _coerce_filename(text: str, current: Any) -> Coerced:
    return Coerced(LocalFileName.from_read_string(text))


_COERCERS: Dict[ValueKind, Callable[[str, Any], Coerced]] = {
    ValueKind.TEXT: _coerce_text,
    ValueKind.INT: _coerce_int,
    ValueKind.UINT: _coerce_uint,
    ValueKind.FLOAT: _coerce_float,
    ValueKind.BOOL: _coerce_bool,
    ValueKind.TRIBOOL: _coerce_tribool,
    ValueKind.DATETIME: _coerce_datetime,
    ValueKind.POINT: _coerce_point,
    ValueKind.FILENAME: _coerce_filename,
}


def coerce(kind: ValueKind, text: str, current: Any = None) -> Coerced:
    """Convert ``text`` into ``kind``.

    ``current`` is the destination's previous value; kinds that keep the
    destination unchanged on bad input return it as the substitute.

    Raises ParseError for date-times and points that cannot be parsed.
    """
    return _COERCERS[ValueKind(kind)](text, current)
