from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

SPACES_PER_TAB = 8
PLACEHOLDER_KEY = " "


def canonical_name_form(name: str) -> str:
    """Normalize a key or token for comparison: lower case, '_' as ' '."""
    return name.replace("_", " ").lower()


@dataclass(frozen=True)
class ParsedLine:
    """A single line split into indentation, key and value.

    ``issues`` holds formatting warnings found while splitting; the caller
    decides which line number to attach them to.
    """

    indent: int
    key: str
    value: str
    has_colon: bool = False
    issues: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def blank(self) -> bool:
        return not self.key


def count_indent(line: str) -> int:
    indent = 0
    while indent < len(line) and line[indent] == "\t":
        indent += 1
    return indent


def parse_line(
    line: str,
    *,
    lenient: bool = False,
    in_text: bool = False,
    spaces_per_tab: int = SPACES_PER_TAB,
) -> ParsedLine:
    indent = count_indent(line)
    if not line.strip(" \t") or line[indent] == "#":
        return ParsedLine(indent=indent, key="", value="")

    issues = []
    check_format = not lenient and not in_text
    pos = line.find(":", indent)
    key = line[indent:pos] if pos >= 0 else line[indent:]
    if check_format and key.startswith(" "):
        issues.append(f"key: '{key}' starts with a space; only use TABs for indentation!")
        tab = " " * spaces_per_tab
        while key.startswith(tab):
            key = key[spaces_per_tab:]
            indent += 1
    key = canonical_name_form(key.strip(" \t"))

    if pos < 0:
        if check_format:
            issues.append("Missing ':'")
        value = ""
    else:
        value = line[pos + 1 :].lstrip(" \t")
        if not key:
            key = PLACEHOLDER_KEY

    return ParsedLine(indent=indent, key=key, value=value, has_colon=pos >= 0, issues=tuple(issues))
