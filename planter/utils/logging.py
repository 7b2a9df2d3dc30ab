"""
Logging utilities for Planter backend.

Provides standardized logger configuration following privacy rules.

RULES:
- NEVER log completion API keys, Supabase Auth tokens, or secrets
- NEVER log full chat message contents (log lengths instead)
- NEVER log raw completion output beyond a short preview at DEBUG level

Acceptable logging:
- High-level events (e.g., "Recommendations generated via completion backend")
- Strategy decisions and fallback reasons (exception class + message)
- Counts (parsed entries, persisted rows, chat turns)
"""

import logging
from typing import Optional

from planter.config import settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to settings.LOG_LEVEL)

    Returns:
        Configured logger instance

    Usage:
        >>> from planter.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Watering sweep finished")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
