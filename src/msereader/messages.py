from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Callable, Deque, List, Optional, Tuple

logger = logging.getLogger(__name__)


class MessageType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


MessageSink = Callable[[MessageType, str], None]

_LEVELS = {
    MessageType.INFO: logging.INFO,
    MessageType.WARNING: logging.WARNING,
    MessageType.ERROR: logging.ERROR,
}


def log_message(kind: MessageType, text: str) -> None:
    logger.log(_LEVELS[kind], "%s", text)


class MessageQueue:
    """Queue of user-facing messages produced while reading documents.

    Messages are kept until drained. Every queued message is also passed to
    ``sink``, which defaults to the module logger.
    """

    def __init__(self, sink: Optional[MessageSink] = log_message) -> None:
        self._messages: Deque[Tuple[MessageType, str]] = deque()
        self.sink = sink

    def queue_message(self, kind: MessageType, text: str) -> None:
        self._messages.append((kind, text))
        if self.sink is not None:
            self.sink(kind, text)

    def drain(self) -> List[Tuple[MessageType, str]]:
        out = list(self._messages)
        self._messages.clear()
        return out

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(list(self._messages))
