import io
import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from msereader import MessageQueue, Reader  # noqa: E402


@pytest.fixture()
def messages() -> MessageQueue:
    return MessageQueue(sink=None)


@pytest.fixture()
def make_reader(messages):
    """Build a Reader over document text (str is encoded as UTF-8)."""

    def _make(text, **kwargs):
        data = text.encode("utf-8") if isinstance(text, str) else text
        kwargs.setdefault("filename", "test.mse")
        kwargs.setdefault("messages", messages)
        return Reader(io.BytesIO(data), **kwargs)

    return _make
