from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from .errors import InternalError, ParseError
from .line_parser import canonical_name_form

if TYPE_CHECKING:
    from .cursor import BlockCursor


class EnumReader:
    """Match one value read from a document against caller-offered names.

    Usage::

        er = EnumReader(reader.get_value(), current=Color.RED)
        er.handle("red", Color.RED)
        er.handle("green", Color.GREEN)
        er.warn_if_not_done(reader)
        color = er.value
    """

    def __init__(self, text: str, current: Any = None) -> None:
        self.read = canonical_name_form(text)
        self.text = text
        self.value = current
        self.done = False
        self.first: Optional[str] = None

    def handle(self, name: str, selection: Any) -> bool:
        if self.first is None:
            self.first = name
        if not self.done and canonical_name_form(name) == self.read:
            self.done = True
            self.value = selection
            return True
        return False

    def not_done_error_message(self) -> str:
        if self.first is None:
            raise InternalError("No first value in EnumReader")
        return f"Unrecognized value: '{self.text}'\n\texpected e.g. '{self.first}'"

    def warn_if_not_done(self, errors_to: "BlockCursor") -> None:
        if not self.done:
            errors_to.warning(self.not_done_error_message())

    def error_if_not_done(self) -> None:
        if not self.done:
            raise ParseError(self.not_done_error_message())
