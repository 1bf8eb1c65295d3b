"""JSON → notation converter.

Flattens the parsed value tree depth-first:

    {"order": {"id": 1, "tags": ["a"]}}

becomes::

    ORDER OBJECT
      ID 1
      TAGS ARRAY
        ITEM 0
          VALUE a
"""

from __future__ import annotations

import json
from typing import Any

from ..lines import TokenLine, create_line, render_lines, to_upper_snake
from ..schema import FORMAT_LABELS, InputFormat
from ..utils.errors import ConversionError
from ..utils.logging import logger

__all__ = ["detect", "convert", "convert_value", "parse"]

LABEL = FORMAT_LABELS[InputFormat.JSON]


class NumberLiteral(str):
    """A JSON number kept in its source spelling."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name}")


def parse(text: str) -> Any:
    """Parse JSON, keeping numbers as written and rejecting NaN/Infinity."""
    return json.loads(
        text,
        parse_int=NumberLiteral,
        parse_float=NumberLiteral,
        parse_constant=_reject_constant,
    )


def detect(text: str) -> bool:
    trimmed = text.strip()
    if not trimmed.startswith(("{", "[")):
        return False
    try:
        parse(trimmed)
    except (ValueError, RecursionError):
        return False
    return True


def convert(text: str) -> str:
    try:
        data = _load(text)
    except ConversionError as e:
        logger.debug(f"JSON conversion failed: {e}")
        return e.to_line()
    return convert_value(data)


def _load(text: str) -> Any:
    try:
        return parse(text)
    except (ValueError, RecursionError) as e:
        raise ConversionError(LABEL, str(e)) from e


def convert_value(data: Any) -> str:
    """Flatten an already-parsed value tree."""
    lines: list[TokenLine] = []
    _flatten(data, lines, None, 0)
    return render_lines(lines)


def _keyword(key: str) -> str:
    return to_upper_snake(key) or "KEY"


def _flatten(value: Any, lines: list[TokenLine], key: str | None, indent: int) -> None:
    keyword = _keyword(key) if key is not None else "VALUE"

    if value is None:
        lines.append(create_line(keyword, "NULL", indent))
    elif isinstance(value, bool):
        lines.append(create_line(keyword, "TRUE" if value else "FALSE", indent))
    elif isinstance(value, NumberLiteral):
        lines.append(create_line(keyword, str(value), indent))
    elif isinstance(value, (int, float)):
        lines.append(create_line(keyword, json.dumps(value), indent))
    elif isinstance(value, str):
        lines.append(create_line(keyword, value, indent))
    elif isinstance(value, list):
        if key is not None:
            lines.append(create_line(keyword, "ARRAY", indent))
        for index, item in enumerate(value):
            lines.append(create_line("ITEM", str(index), indent + 1))
            _flatten(item, lines, None, indent + 2)
    elif isinstance(value, dict):
        child_indent = indent
        if key is not None:
            lines.append(create_line(keyword, "OBJECT", indent))
            child_indent += 1
        for k, v in value.items():
            _flatten(v, lines, str(k), child_indent)
    else:
        lines.append(create_line(keyword, str(value), indent))
