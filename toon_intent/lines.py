"""Token-line primitives shared by every converter.

A notation line is ``indent keyword (SP value)?`` with two spaces per
indentation level. Values never contain newlines.
"""

from __future__ import annotations

import re
from typing import Iterable, NamedTuple

__all__ = [
    "INDENT",
    "TokenLine",
    "create_line",
    "normalize",
    "render_lines",
    "sanitize",
    "to_upper_snake",
]

INDENT = "  "

_WHITESPACE = re.compile(r"\s+")
_NEWLINES = re.compile(r"[\r\n]+")
# lowerUpper, digitUpper and the last capital of an acronym run (HTTPServer)
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
# Unicode letters and digits survive; everything else separates words
_NON_WORD = re.compile(r"[\W_]+")


class TokenLine(NamedTuple):
    """One output line: keyword, optional value, indentation level."""

    keyword: str
    value: str | None = None
    indent: int = 0

    def render(self) -> str:
        pad = INDENT * self.indent
        if self.value:
            return f"{pad}{self.keyword} {self.value}"
        return f"{pad}{self.keyword}"


def create_line(keyword: str, value: str | None = None, indent: int = 0) -> TokenLine:
    """Build a line, flattening newlines in the value."""
    if value is not None:
        value = sanitize(value)
    return TokenLine(keyword, value, max(indent, 0))


def render_lines(lines: Iterable[TokenLine]) -> str:
    return "\n".join(line.render() for line in lines)


def sanitize(value: str) -> str:
    """Collapse embedded newlines to spaces and trim."""
    return _NEWLINES.sub(" ", value).strip()


def normalize(text: str) -> str:
    """Trim and collapse every whitespace run (blank lines included) to one space."""
    return _WHITESPACE.sub(" ", text.strip())


def to_upper_snake(name: str) -> str:
    """Convert ``camelCase``, ``PascalCase`` or spaced labels to ``UPPER_SNAKE``.

    >>> to_upper_snake("orderId")
    'ORDER_ID'
    >>> to_upper_snake("HTTPServer")
    'HTTP_SERVER'
    >>> to_upper_snake("first name")
    'FIRST_NAME'
    """
    split = _CAMEL_BOUNDARY.sub("_", name.strip())
    return _NON_WORD.sub("_", split).strip("_").upper()
