from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Union

_DOTTED = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")
_PACKED = re.compile(r"\d+")


@total_ordering
@dataclass(frozen=True)
class Version:
    """Document format version packed as ``(major*1000 + minor)*1000 + build``."""

    number: int = 0

    @classmethod
    def of(cls, major: int, minor: int = 0, build: int = 0) -> "Version":
        return cls((major * 1000 + minor) * 1000 + build)

    @classmethod
    def from_string(cls, text: str) -> "Version":
        """Parse ``major.minor[.build]`` or an already packed integer."""
        text = text.strip()
        m = _DOTTED.fullmatch(text)
        if m:
            major, minor, build = (int(g) if g else 0 for g in m.groups())
            return cls.of(major, minor, build)
        if _PACKED.fullmatch(text):
            return cls(int(text))
        raise ValueError(f"Expected version number instead of '{text}'")

    @classmethod
    def coerce(cls, value: Union["Version", str, int]) -> "Version":
        if isinstance(value, Version):
            return value
        if isinstance(value, int):
            return cls(value)
        return cls.from_string(value)

    @property
    def major(self) -> int:
        return self.number // 1000000

    @property
    def minor(self) -> int:
        return self.number // 1000 % 1000

    @property
    def build(self) -> int:
        return self.number % 1000

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.number < other.number

    def __bool__(self) -> bool:
        return self.number != 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}"


ZERO = Version(0)
