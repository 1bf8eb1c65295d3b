"""YAML → notation converter.

Parses with PyYAML, re-serializes the value tree as JSON and hands it to
the JSON converter, so both formats share one output grammar.
"""

from __future__ import annotations

import json
import re
from typing import Any

import yaml

from . import json_data
from ..schema import FORMAT_LABELS, InputFormat
from ..utils.errors import ConversionError
from ..utils.logging import logger

__all__ = ["detect", "convert", "to_json"]

LABEL = FORMAT_LABELS[InputFormat.YAML]

_KEY_LINE = re.compile(r"^\w+:\s*.+", re.MULTILINE)


def detect(text: str) -> bool:
    trimmed = text.strip()
    if not (trimmed.startswith("---") or _KEY_LINE.search(trimmed)):
        return False
    try:
        yaml.safe_load(trimmed)
    except (yaml.YAMLError, ValueError, RecursionError):
        return False
    return True


def to_json(text: str) -> str:
    """Parse YAML and return the equivalent compact JSON document.

    Raises:
        ConversionError: The YAML is malformed or holds values JSON cannot express.
    """
    try:
        data: Any = yaml.safe_load(text)
        # dates and timestamps become ISO strings
        return json.dumps(data, default=str, allow_nan=False)
    except (yaml.YAMLError, ValueError, TypeError, RecursionError) as e:
        raise ConversionError(LABEL, str(e)) from e


def convert(text: str) -> str:
    try:
        document = to_json(text)
    except ConversionError as e:
        logger.debug(f"YAML conversion failed: {e}")
        return e.to_line()
    return json_data.convert(document)
