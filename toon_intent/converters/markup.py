"""HTML-like markup → notation converter.

A lightweight pattern matcher, not a conformant HTML parser. Each element
becomes ``ELEMENT <TAG>`` followed by its attributes and either nested
elements or a ``TEXT`` line, one indentation level deeper.

Known quirk: an element's closing tag is paired with a back-reference to
its name, so the first ``</div>`` closes the outermost open ``<div>``.
For self-nested same-named tags (``<div><div>a</div><p/></div>``) the
outer element ends early and later siblings surface one level up. This
pairing is kept as-is; see ``_ELEMENT``.
"""

from __future__ import annotations

import re

from ..lines import TokenLine, create_line, render_lines
from ..schema import FORMAT_LABELS, InputFormat
from ..utils.errors import ConversionError
from ..utils.logging import logger

__all__ = ["detect", "convert"]

LABEL = FORMAT_LABELS[InputFormat.HTML]

_OPENING = re.compile(r"^<[^>]+>")
_CLOSING = re.compile(r"</[^>]+>$")
_COMMENT = re.compile(r"<!--[\s\S]*?-->")
_ANY_TAG = re.compile(r"<[^>]+>")
# Lazy content up to the first closing tag with the same name.
_ELEMENT = re.compile(r"<(\w+)([^>]*)>([\s\S]*?)</\1>|<(\w+)([^>]*?)\s*/>")
_ATTRIBUTE = re.compile(
    r"""([^\s=/>"']+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?"""
)


def detect(text: str) -> bool:
    trimmed = text.strip()
    return bool(_OPENING.search(trimmed) or _CLOSING.search(trimmed))


def convert(text: str) -> str:
    lines: list[TokenLine] = []
    try:
        _parse(text, lines, 0)
    except RecursionError:
        error = ConversionError(LABEL, "maximum nesting depth exceeded")
        logger.debug(f"HTML conversion failed: {error}")
        return error.to_line()
    return render_lines(lines)


def _parse(markup: str, lines: list[TokenLine], indent: int) -> None:
    markup = _COMMENT.sub("", markup)

    matched = False
    for match in _ELEMENT.finditer(markup):
        matched = True
        tag, attrs, content, void_tag, void_attrs = match.groups()

        if void_tag:
            lines.append(create_line("ELEMENT", void_tag.upper(), indent))
            _parse_attributes(void_attrs or "", lines, indent + 1)
            continue

        lines.append(create_line("ELEMENT", tag.upper(), indent))
        _parse_attributes(attrs, lines, indent + 1)

        inner = content.strip()
        if _ANY_TAG.search(inner):
            _parse(inner, lines, indent + 1)
        elif inner:
            lines.append(create_line("TEXT", inner, indent + 1))

    if not matched:
        text_only = _ANY_TAG.sub("", markup).strip()
        if text_only:
            lines.append(create_line("TEXT", text_only, indent))


def _parse_attributes(attrs: str, lines: list[TokenLine], indent: int) -> None:
    """Emit CLASS, then ID, then EVENT lines, then ATTR lines."""
    css_class: str | None = None
    element_id: str | None = None
    events: list[str] = []
    others: list[str] = []

    for match in _ATTRIBUTE.finditer(attrs):
        name = match.group(1)
        value = next((g for g in match.group(2, 3, 4) if g is not None), "").strip()
        lowered = name.lower()

        if lowered == "class":
            if value and css_class is None:
                css_class = value
        elif lowered == "id":
            if value and element_id is None:
                element_id = value
        elif lowered.startswith("on"):
            if value:
                events.append(f"{name} {value}")
        elif value:
            others.append(f"{name} {value}")
        else:
            others.append(name)

    if css_class:
        lines.append(create_line("CLASS", css_class, indent))
    if element_id:
        lines.append(create_line("ID", element_id, indent))
    lines.extend(create_line("EVENT", event, indent) for event in events)
    lines.extend(create_line("ATTR", other, indent) for other in others)
