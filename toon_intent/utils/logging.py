"""Package logger.

Library modules import ``logger`` from here and never configure handlers;
entry points call :func:`init` once.
"""

from __future__ import annotations

import logging
import sys

__all__ = ["logger", "init"]

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

logger = logging.getLogger("toon_intent")


def init(level: str | int | None = None) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Args:
        level: Log level name or number. Defaults to ``Settings.log_level``.

    Returns:
        The configured package logger.
    """
    if level is None:
        from ..config import get_settings

        level = get_settings().log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    if not any(getattr(h, "_toon_intent", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._toon_intent = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger
