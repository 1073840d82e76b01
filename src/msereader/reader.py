from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import (
    Any,
    BinaryIO,
    Callable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from .config import ReaderSettings
from .coercion import LocalFileName, Point, ValueKind, coerce
from .cursor import BlockCursor, CursorState
from .diagnostics import Diagnostic
from .enum_reader import EnumReader
from .errors import FileParseError, ParseError
from .messages import MessageQueue, MessageType
from .version import ZERO, Version

logger = logging.getLogger(__name__)

T = TypeVar("T")

Candidates = Union[Mapping[str, Any], Iterable[Tuple[str, Any]], Type[Enum]]


class Reflectable(Protocol):
    """An object that knows which keys it reads.

    ``reflect`` is called repeatedly, once per pass over the keys of the
    object's block, and should offer every field it has::

        def reflect(self, reader):
            self.name = reader.handle("name", ValueKind.TEXT, self.name)
    """

    def reflect(self, reader: "Reader") -> None: ...


class Reader(BlockCursor):
    """Pull-style reader for one indentation-structured document.

    Construction consumes the byte order mark, moves to the first key and
    reads the reserved version block, so the first key the caller sees is
    the first piece of real content.

    Args:
        stream: binary stream, owned by the caller.
        package: optional container the document belongs to, kept for
            collaborators that resolve references relative to it.
        filename: name used in diagnostics.
        ignore_invalid: leniency flag; defaults to ``settings.ignore_invalid``.
        app_version: format version of the running application; defaults to
            ``settings.app_version``.
        settings: shared reader options.
        messages: queue receiving user-facing messages.
    """

    def __init__(
        self,
        stream: BinaryIO,
        package: Any = None,
        filename: str = "",
        ignore_invalid: Optional[bool] = None,
        app_version: Union[Version, str, int, None] = None,
        settings: Optional[ReaderSettings] = None,
        messages: Optional[MessageQueue] = None,
    ) -> None:
        self.settings = settings or ReaderSettings()
        if ignore_invalid is None:
            ignore_invalid = self.settings.ignore_invalid
        super().__init__(
            stream,
            filename=filename,
            ignore_invalid=ignore_invalid,
            spaces_per_tab=self.settings.spaces_per_tab,
            chunk_size=self.settings.chunk_size,
        )
        self.package = package
        self.app_version = Version.coerce(app_version) if app_version is not None else self.settings.version
        self.messages = messages if messages is not None else MessageQueue()
        self.file_app_version: Version = ZERO
        self.eat_bom()
        self.advance()
        self._handle_app_version()

    # Versioning

    def _handle_app_version(self) -> None:
        if not self.enter_block(self.settings.version_key):
            return
        text = self.get_value()
        try:
            self.file_app_version = Version.from_string(text)
        except ValueError as e:
            self.warning(str(e))
        if self.app_version < self.file_app_version:
            self.messages.queue_message(
                MessageType.WARNING,
                f"{self.filename}\nThis file was created by a newer version ({self.file_app_version}) "
                f"than this application supports ({self.app_version}).\n"
                "Some parts of the file may be lost when it is opened.",
            )
        self.exit_block()

    @property
    def newer_than_app(self) -> bool:
        return self.app_version < self.file_app_version

    def handle_ignore(self, end_version: Union[Version, str, int], name: str) -> None:
        """Skip block ``name`` if the document predates ``end_version``.

        Such blocks only existed in older versions of the format.
        """
        if self.file_app_version < Version.coerce(end_version):
            if self.enter_block(name):
                self.exit_block()

    # Diagnostics

    @property
    def warnings(self) -> List[Diagnostic]:
        return list(self.diagnostics.entries)

    def show_warnings(self) -> Optional[str]:
        """Post collected warnings as one message; returns its text, if any."""
        return self.diagnostics.flush(self.messages)

    def discard_warnings(self) -> None:
        self.diagnostics.clear()

    # Typed values

    def handle_value(self, kind: ValueKind, current: Any = None) -> Any:
        """Read the current value and convert it to ``kind``."""
        text = self.get_value()
        try:
            result = coerce(kind, text, current)
        except ParseError as e:
            if e.line_number is not None:
                raise
            raise ParseError(e.message, self.previous_line_number) from e
        if result.warning:
            self.warning(result.warning)
        return result.value

    def handle(self, name: str, kind: ValueKind, current: Any = None) -> Any:
        """Read key ``name`` if it is the current key, else return ``current``."""
        if not self.enter_block(name):
            return current
        value = self.handle_value(kind, current)
        self.exit_block()
        return value

    def read_text(self, current: str = "") -> str:
        return self.handle_value(ValueKind.TEXT, current)

    def read_int(self, current: int = 0) -> int:
        return self.handle_value(ValueKind.INT, current)

    def read_uint(self, current: int = 0) -> int:
        return self.handle_value(ValueKind.UINT, current)

    def read_float(self, current: float = 0.0) -> float:
        return self.handle_value(ValueKind.FLOAT, current)

    def read_bool(self, current: bool = False) -> bool:
        return self.handle_value(ValueKind.BOOL, current)

    def read_tribool(self, current: Optional[bool] = None) -> Optional[bool]:
        return self.handle_value(ValueKind.TRIBOOL, current)

    def read_datetime(self, current: Optional[datetime] = None) -> datetime:
        return self.handle_value(ValueKind.DATETIME, current)

    def read_point(self, current: Optional[Point] = None) -> Point:
        return self.handle_value(ValueKind.POINT, current or Point())

    def read_filename(self, current: Optional[LocalFileName] = None) -> LocalFileName:
        return self.handle_value(ValueKind.FILENAME, current)

    # Enumerations

    def handle_enum(self, candidates: Candidates, current: Any = None, strict: bool = False) -> Any:
        """Decode the current value as one of ``candidates``.

        Unrecognized values are a warning (keeping ``current``), or a
        ParseError when ``strict``.
        """
        decoder = EnumReader(self.get_value(), current)
        for name, selection in _candidate_pairs(candidates):
            decoder.handle(name, selection)
        if strict:
            try:
                decoder.error_if_not_done()
            except ParseError as e:
                raise ParseError(e.message, self.previous_line_number) from e
        else:
            decoder.warn_if_not_done(self)
        return decoder.value

    def enum_field(self, name: str, candidates: Candidates, current: Any = None, strict: bool = False) -> Any:
        if not self.enter_block(name):
            return current
        value = self.handle_enum(candidates, current, strict=strict)
        self.exit_block()
        return value

    # Records

    def read_record(self, record: Reflectable) -> None:
        """Read keys into ``record`` until its block ends.

        Keys may appear in any order; a pass over ``record.reflect`` that
        consumes nothing makes the current key an unknown key.
        """
        if self._state == CursorState.ENTERED:
            self.advance()
        while True:
            record.reflect(self)
            if self._state != CursorState.HANDLED:
                self.unknown_key()
            self._state = CursorState.OUTSIDE
            if self._indent < self._expected_indent:
                break

    def handle_record(self, name: str, record: T) -> T:
        if self.enter_block(name):
            self.read_record(record)
            self.exit_block()
        return record

    def handle_records(self, name: str, factory: Callable[[], T], items: List[T]) -> List[T]:
        """Append a new record to ``items`` for each ``name`` block met."""
        if self.enter_block(name):
            item = factory()
            self.read_record(item)
            self.exit_block()
            items.append(item)
        return items


def _candidate_pairs(candidates: Candidates) -> Iterator[Tuple[str, Any]]:
    if isinstance(candidates, type) and issubclass(candidates, Enum):
        members = list(candidates)
        for member in members:
            yield str(member.value), member
        for member in members:
            yield member.name, member
    elif isinstance(candidates, Mapping):
        yield from candidates.items()
    else:
        yield from candidates


def lookup(reader: Reader, path: str) -> Optional[str]:
    """Return the text at a dotted path of nested keys, or None.

    Sibling keys on the way are skipped without warnings.
    """
    segments = [s for s in path.split(".") if s]
    if not segments:
        raise ValueError("Empty key path")
    depth = 0
    found = True
    for segment in segments:
        while not reader.enter_block(segment):
            if reader.at_end or reader.indent < reader.expected_indent:
                found = False
                break
            if not reader.skip_block():
                reader.advance()
        if not found:
            break
        depth += 1
    value = reader.get_value() if found else None
    for _ in range(depth):
        reader.exit_block()
    return value


def read_document(
    stream: BinaryIO,
    record: Reflectable,
    filename: str = "",
    show_warnings: bool = True,
    **kwargs: Any,
) -> Reader:
    """Read a whole document into ``record``.

    Fatal errors are re-raised as FileParseError naming ``filename``; the
    record is then only partially populated and should be discarded.
    """
    try:
        reader = Reader(stream, filename=filename, **kwargs)
        reader.read_record(record)
    except FileParseError:
        raise
    except ParseError as e:
        logger.error("Failed to read %s: %s", filename or "<stream>", e)
        raise FileParseError(e.message, filename, e.line_number) from e
    if show_warnings:
        reader.show_warnings()
    return reader


@contextmanager
def open_reader(path: Union[str, Path], **kwargs: Any) -> Iterator[Reader]:
    """Open ``path`` and yield a Reader over it; the file is closed on exit."""
    p = Path(path)
    with p.open("rb") as f:
        yield Reader(f, filename=kwargs.pop("filename", str(p)), **kwargs)
