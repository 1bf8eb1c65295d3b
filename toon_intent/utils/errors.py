"""Error types.

Conversion failures never reach callers as exceptions: converters raise
:class:`ConversionError` internally and render it as a single ``ERROR`` line.
"""

from __future__ import annotations

__all__ = ["ToonIntentError", "ConversionError", "UnsupportedFormatError"]


class ToonIntentError(Exception):
    """Base class for toon_intent errors."""


class ConversionError(ToonIntentError):
    """Input could not be parsed by a structural converter."""

    def __init__(self, label: str, message: str):
        super().__init__(f"Invalid {label}: {message}")
        self.label = label
        self.message = message

    def to_line(self) -> str:
        """Render as the single notation line callers receive."""
        message = " ".join(self.message.split())
        return f"ERROR Invalid {self.label}: {message}"


class UnsupportedFormatError(ToonIntentError, ValueError):
    """Requested format is not one of the known input formats."""

    def __init__(self, value: object):
        super().__init__(f"Unsupported format: {value!r}")
        self.value = value
