"""toon_intent - structured text → compact intent notation.

Converts JSON, YAML, HTML, React/JSX component source or free text into
uppercase-keyword lines for LLM prompts, with token estimates for the
input and the output.

Example:
    >>> from toon_intent import convert
    >>> result = convert('{"order": {"id": 1, "status": "paid"}}', "json")
    >>> print(result.tokens)
    ORDER OBJECT
      ID 1
      STATUS paid
"""

__version__ = "0.1.0"

from .lines import TokenLine, create_line, to_upper_snake
from .orchestrator import ToonConverter, convert, detect_format
from .schema import ConversionResult, ConversionStats, InputFormat
from .tokens import estimate_tokens
from .utils.errors import ConversionError, ToonIntentError, UnsupportedFormatError

__all__ = [
    "convert",
    "detect_format",
    "estimate_tokens",
    "create_line",
    "to_upper_snake",
    "ConversionError",
    "ConversionResult",
    "ConversionStats",
    "InputFormat",
    "TokenLine",
    "ToonConverter",
    "ToonIntentError",
    "UnsupportedFormatError",
]
