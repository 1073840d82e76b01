from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .messages import MessageQueue, MessageType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    line_number: int
    message: str

    def format(self) -> str:
        return f"\nOn line {self.line_number}: \t{self.message}"


@dataclass
class DiagnosticsLog:
    """Warnings collected while reading a single document.

    Entries are only surfaced when ``flush`` is called; a log that is never
    flushed is silently dropped together with its reader.
    """

    filename: str = ""
    entries: List[Diagnostic] = field(default_factory=list)

    def add(self, line_number: int, message: str) -> Diagnostic:
        entry = Diagnostic(line_number=line_number, message=message)
        self.entries.append(entry)
        logger.debug("%s:%d: %s", self.filename or "<stream>", line_number, message)
        return entry

    def render(self) -> str:
        body = "".join(e.format() for e in self.entries)
        return f"Warnings while reading file:\n{self.filename}\n{body}"

    def flush(self, queue: MessageQueue) -> Optional[str]:
        """Post all entries as one aggregated warning and clear the log."""
        if not self.entries:
            return None
        text = self.render()
        queue.queue_message(MessageType.WARNING, text)
        self.entries.clear()
        return text

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)
