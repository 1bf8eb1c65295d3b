"""Structural converters, one module per input format.

Each module exposes ``detect(text) -> bool`` and ``convert(text) -> str``;
neither raises and neither keeps state between calls.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Protocol

from ..schema import InputFormat
from . import component, json_data, markup, text, yaml_data

__all__ = ["Converter", "CONVERTERS", "DETECTION_ORDER"]


class Converter(Protocol):
    def detect(self, text: str) -> bool: ...

    def convert(self, text: str) -> str: ...


CONVERTERS: Mapping[InputFormat, Converter] = MappingProxyType({
    InputFormat.REACT: component,
    InputFormat.HTML: markup,
    InputFormat.JSON: json_data,
    InputFormat.YAML: yaml_data,
    InputFormat.TEXT: text,
})

# Most specific first; text always matches.
DETECTION_ORDER: tuple[InputFormat, ...] = (
    InputFormat.REACT,
    InputFormat.HTML,
    InputFormat.JSON,
    InputFormat.YAML,
    InputFormat.TEXT,
)

