"""Free text → notation converter.

Paragraphs (separated by blank lines) are classified, first match wins:

- heading: one short line that upper-casing leaves unchanged (capitals,
  digits, punctuation), that ends with ``:`` or that starts with ``#``;
  the text, ``#`` markers included, is kept as written
- list: ``-``, ``*`` or ``•`` bullets, one ``ITEM`` per bullet
- key-value: ``label: rest`` on every line
- anything else: ``TEXT``
"""

from __future__ import annotations

import re

from ..lines import TokenLine, create_line, render_lines, to_upper_snake

__all__ = ["detect", "convert"]

EMPTY = "TEXT (empty)"
MAX_HEADING_LEN = 50

_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n\s*")
_MARKDOWN_HEADING = re.compile(r"^#+\s+")
_BULLET = re.compile(r"^[-*•]\s+")
_KEY_VALUE = re.compile(r"^([^:\n]+):\s*(.+)$")


def detect(text: str) -> bool:
    return True


def convert(text: str) -> str:
    lines: list[TokenLine] = []
    for paragraph in _PARAGRAPH_BREAK.split(text.replace("\r\n", "\n")):
        paragraph = paragraph.strip()
        if paragraph:
            lines.extend(_classify(paragraph))
    return render_lines(lines) or EMPTY


def _classify(paragraph: str) -> list[TokenLine]:
    if _is_heading(paragraph):
        return [create_line("HEADING", paragraph)]

    if _BULLET.match(paragraph):
        return [create_line("ITEM", item) for item in _list_items(paragraph)]

    pairs = _key_values(paragraph)
    if pairs:
        return [create_line(keyword, value) for keyword, value in pairs]

    return [create_line("TEXT", paragraph)]


def _is_heading(paragraph: str) -> bool:
    if "\n" in paragraph or len(paragraph) >= MAX_HEADING_LEN:
        return False
    return (
        paragraph == paragraph.upper()
        or paragraph.endswith(":")
        or bool(_MARKDOWN_HEADING.match(paragraph))
    )


def _list_items(paragraph: str) -> list[str]:
    items: list[str] = []
    for line in paragraph.split("\n"):
        line = line.strip()
        if match := _BULLET.match(line):
            items.append(line[match.end():])
        elif items and line:
            items[-1] = f"{items[-1]} {line}"
    return items


def _key_values(paragraph: str) -> list[tuple[str, str]]:
    """Return (KEYWORD, value) pairs only if every line is ``label: rest``."""
    pairs: list[tuple[str, str]] = []
    for line in paragraph.split("\n"):
        match = _KEY_VALUE.match(line.strip())
        if not match:
            return []
        label, rest = match.groups()
        keyword = to_upper_snake(label)
        if not keyword or rest.startswith("//"):
            return []
        pairs.append((keyword, rest.strip()))
    return pairs
