"""The indentation state machine that gives documents their tree structure.

The cursor always sits on one key line (or past the end of the stream). Block
entry and exit only adjust ``expected_indent`` and move forward, there is no
recursion and no backtracking.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import BinaryIO

from .diagnostics import Diagnostic, DiagnosticsLog
from .errors import ReaderStateError
from .line_parser import SPACES_PER_TAB, canonical_name_form, parse_line
from .scanner import DEFAULT_CHUNK_SIZE, LineScanner

logger = logging.getLogger(__name__)

NO_LINE = -1

TEXT_BLOCK_INDENT_WARNING = (
    "Blank line or comment in text block, that is insufficiently indented.\n"
    "\t\tEither indent the comment/blank line, or add a 'key:' after it.\n"
    "\t\tThis could cause more error messages.\n"
)


class CursorState(str, Enum):
    OUTSIDE = "outside"
    ENTERED = "entered"
    HANDLED = "handled"
    UNHANDLED = "unhandled"


class BlockCursor:
    """Forward-only cursor over the key lines of one document.

    ``ignore_invalid`` switches on leniency: formatting problems are not
    reported and unknown keys are skipped silently.
    """

    def __init__(
        self,
        stream: BinaryIO,
        filename: str = "",
        ignore_invalid: bool = False,
        spaces_per_tab: int = SPACES_PER_TAB,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.filename = filename
        self.ignore_invalid = ignore_invalid
        self.spaces_per_tab = spaces_per_tab
        self.diagnostics = DiagnosticsLog(filename=filename)
        self._scanner = LineScanner(stream, chunk_size=chunk_size)
        self._state = CursorState.OUTSIDE
        self._indent = 0
        self._expected_indent = 0
        self._line = ""
        self._key = ""
        self._value = ""
        self._previous_value = ""
        self._line_number = 0
        self._previous_line_number = 0

    # Read-only view of the cursor

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def indent(self) -> int:
        return self._indent

    @property
    def expected_indent(self) -> int:
        return self._expected_indent

    @property
    def key(self) -> str:
        return self._key

    @property
    def value(self) -> str:
        return self._value

    @property
    def line_number(self) -> int:
        return self._line_number

    @property
    def previous_line_number(self) -> int:
        return self._previous_line_number

    @property
    def at_end(self) -> bool:
        return self._indent == NO_LINE

    # Diagnostics

    def warning(self, message: str, line_delta: int = 0, on_previous_line: bool = True) -> Diagnostic:
        """Record a recoverable problem.

        By default the warning is attributed to the line of the value that
        was read last, since reading a value already moved past it.
        """
        base = self._previous_line_number if on_previous_line else self._line_number
        return self.diagnostics.add(base + line_delta, message)

    # Line reading

    def _read_line(self, in_text: bool = False) -> bool:
        raw = self._scanner.next_line()
        if raw is None:
            self._line = ""
            self._key = ""
            self._value = ""
            return False
        self._line_number += 1
        parsed = parse_line(
            raw,
            lenient=self.ignore_invalid,
            in_text=in_text,
            spaces_per_tab=self.spaces_per_tab,
        )
        self._line = raw
        self._indent = parsed.indent
        self._key = parsed.key
        self._value = parsed.value
        for issue in parsed.issues:
            self.warning(issue, 0, on_previous_line=False)
        return True

    def _skip_blank_lines(self) -> None:
        has_line = True
        while not self._key and has_line:
            has_line = self._read_line()
        if not self._key:
            self._line_number += 1
            self._indent = NO_LINE

    def eat_bom(self) -> bool:
        return self._scanner.eat_bom()

    def advance(self) -> None:
        """Move to the next non-blank line, or to the end of the stream."""
        self._previous_line_number = self._line_number
        self._state = CursorState.HANDLED
        self._key = ""
        self._indent = NO_LINE
        self._skip_blank_lines()

    # Blocks

    def enter_any_block(self) -> bool:
        if self._state == CursorState.ENTERED:
            # still on the key of the parent block, move inside it
            self.advance()
        if self._indent != self._expected_indent:
            return False
        self._state = CursorState.ENTERED
        self._expected_indent += 1
        return True

    def enter_block(self, name: str) -> bool:
        if self._state == CursorState.ENTERED:
            self.advance()
        if self._indent != self._expected_indent:
            return False
        if self._key != canonical_name_form(name):
            return False
        self._state = CursorState.ENTERED
        self._expected_indent += 1
        return True

    def exit_block(self) -> None:
        if self._expected_indent <= 0:
            raise ReaderStateError("exit_block() without a matching enter")
        if self._state == CursorState.UNHANDLED:
            raise ReaderStateError("exit_block() while a value is unhandled")
        self._expected_indent -= 1
        self._previous_value = ""
        if self._state == CursorState.ENTERED:
            self.advance()
        # drop whatever the caller did not read from this block
        while self._indent > self._expected_indent:
            self.advance()
        self._state = CursorState.HANDLED

    def skip_block(self) -> bool:
        """Silently skip the current key and everything nested under it."""
        if not self.enter_any_block():
            return False
        self.exit_block()
        return True

    def unknown_key(self) -> None:
        if self.ignore_invalid:
            self._skip_key()
            return
        if self._indent >= self._expected_indent:
            self.warning(f"Unexpected key: '{self._key}'", 0, on_previous_line=False)
            self._skip_key()
        # otherwise this may be a nameless value at an outer level; leave it

    def _skip_key(self) -> None:
        self.advance()
        while self._indent > self._expected_indent:
            self.advance()

    # Values

    def unhandle(self) -> None:
        if self._state != CursorState.HANDLED:
            raise ReaderStateError(f"unhandle() in state {self._state.value}")
        self._state = CursorState.UNHANDLED

    def get_value(self) -> str:
        """Return the value of the current key and move past it.

        An empty value after the colon means the value is the block of more
        deeply indented lines that follows.
        """
        if self._state == CursorState.HANDLED:
            raise ReaderStateError("get_value() called twice for the same key")
        if self._state == CursorState.UNHANDLED:
            self._state = CursorState.HANDLED
            return self._previous_value
        if self._value:
            self._previous_value = self._value
            self.advance()
            return self._previous_value
        self._previous_value = self._read_text_block()
        return self._previous_value

    def _read_text_block(self) -> str:
        expected = self._expected_indent
        parts = []
        pending_newlines = 0
        has_line = self._read_line(in_text=True)
        self._previous_line_number = self._line_number
        while has_line and self._indent >= expected:
            if pending_newlines:
                parts.append("\n" * pending_newlines)
            pending_newlines = 0
            parts.append(self._line[expected:])
            while True:
                has_line = self._read_line(in_text=True)
                pending_newlines += 1
                # blank lines that are not indented enough may still be inside the text
                if not (has_line and not self._line.strip(" \t") and self._indent < expected):
                    break
        if not has_line:
            self._indent = NO_LINE
        self._state = CursorState.HANDLED
        self._skip_blank_lines()
        if self._indent >= expected:
            self.warning(TEXT_BLOCK_INDENT_WARNING, -1, on_previous_line=False)
        return "".join(parts)
