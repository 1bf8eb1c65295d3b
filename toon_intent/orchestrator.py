"""Conversion orchestrator: format resolution, dispatch and token accounting."""

from __future__ import annotations

from .converters import CONVERTERS, DETECTION_ORDER
from .schema import ConversionResult, InputFormat
from .tokens import CHARS_PER_TOKEN, estimate_tokens
from .utils.logging import logger

__all__ = ["ToonConverter", "convert", "detect_format"]


class ToonConverter:
    """Converts raw text to notation with token estimates.

    Instances hold only the token ratio and can be shared freely.

    Usage:
        converter = ToonConverter()
        result = converter.convert('{"id": 1}', "auto")
        print(result.tokens, result.token_count)
    """

    def __init__(self, chars_per_token: float | None = None):
        if chars_per_token is None:
            from .config import get_settings

            chars_per_token = get_settings().chars_per_token
        if chars_per_token <= 0:
            raise ValueError("chars_per_token must be positive")
        self.chars_per_token = chars_per_token

    def detect_format(self, text: str) -> InputFormat:
        """Resolve a concrete format by running detectors most-specific first."""
        if not text.strip():
            return InputFormat.TEXT
        for fmt in DETECTION_ORDER:
            if CONVERTERS[fmt].detect(text):
                return fmt
        return InputFormat.TEXT

    def convert(self, text: str, fmt: InputFormat | str = InputFormat.AUTO) -> ConversionResult:
        """Convert ``text`` to notation.

        Args:
            text: Raw input.
            fmt: Requested format; ``auto`` runs detection.

        Returns:
            ConversionResult with the notation, its token estimate, the input
            estimate and the resolved format. Parse failures arrive as a single
            ``ERROR`` line in ``tokens``.

        Raises:
            UnsupportedFormatError: ``fmt`` is not a known format name.
        """
        requested = InputFormat.parse(fmt)
        if not text.strip():
            return ConversionResult(tokens="", token_count=0, input_token_estimate=0, format=InputFormat.TEXT)

        resolved = self.detect_format(text) if requested is InputFormat.AUTO else requested
        tokens = CONVERTERS[resolved].convert(text)

        result = ConversionResult(
            tokens=tokens,
            token_count=estimate_tokens(tokens, self.chars_per_token),
            input_token_estimate=estimate_tokens(text, self.chars_per_token),
            format=resolved,
        )
        logger.debug(
            f"Converted {requested} as {resolved}: "
            f"{result.input_token_estimate} -> {result.token_count} tokens"
        )
        return result


_default = ToonConverter(CHARS_PER_TOKEN)


def convert(text: str, fmt: InputFormat | str = InputFormat.AUTO) -> ConversionResult:
    """Convert with the default ratio. See :meth:`ToonConverter.convert`."""
    return _default.convert(text, fmt)


def detect_format(text: str) -> InputFormat:
    return _default.detect_format(text)
