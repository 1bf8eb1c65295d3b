"""Token estimation.

The estimate is a character-ratio heuristic over whitespace-normalized
text, not a real tokenizer. :func:`count_tokens_exact` gives a
``cl100k_base`` count for benchmarking when tiktoken can load its
encoding.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from .lines import normalize
from .utils.logging import logger

if TYPE_CHECKING:
    import tiktoken as _tiktoken

__all__ = ["CHARS_PER_TOKEN", "estimate_tokens", "count_tokens_exact"]

CHARS_PER_TOKEN = 4.0

_tiktoken_enc: _tiktoken.Encoding | None = None


def estimate_tokens(text: str, chars_per_token: float = CHARS_PER_TOKEN) -> int:
    """Estimate LLM tokens for ``text``.

    Args:
        text: Raw text; it is normalized before measuring.
        chars_per_token: Empirical characters-per-token ratio.

    Returns:
        ``ceil(len(normalize(text)) / chars_per_token)``; 0 for blank text.
    """
    if chars_per_token <= 0:
        raise ValueError("chars_per_token must be positive")
    if not text:
        return 0
    return math.ceil(len(normalize(text)) / chars_per_token)


def count_tokens_exact(text: str) -> int | None:
    """Count ``cl100k_base`` tokens, or None when the encoding is unavailable."""
    global _tiktoken_enc
    try:
        if _tiktoken_enc is None:
            import tiktoken

            _tiktoken_enc = tiktoken.get_encoding("cl100k_base")
        return len(_tiktoken_enc.encode(text))
    except Exception as e:  # encoding download can fail offline
        logger.warning(f"Exact token count unavailable: {e}")
        return None
