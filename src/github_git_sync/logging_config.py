"""Logging configuration utilities for github-git-sync.

The library logs through loguru. Nothing is configured on import; applications either configure loguru themselves or
call `configure_logger` here.
"""

import sys
from typing import Literal

from loguru import logger

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logger(
    level: LogLevel = "WARNING",
    *,
    format_string: str | None = None,
    colorize: bool = True,
) -> None:
    """Replace all loguru handlers with a single stderr handler.

    Args:
        level: The minimum log level to display.
        format_string: Custom format string for log messages. If None, uses `DEFAULT_FORMAT`.
        colorize: Whether to use colored output (default: True)

    Examples:
        ```python
        from github_git_sync.logging_config import configure_logger

        # See every request failure and each dirty path found by the sync check
        configure_logger("DEBUG")
        ```
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=format_string if format_string is not None else DEFAULT_FORMAT,
        colorize=colorize,
    )


def disable_logging() -> None:
    """Remove all loguru handlers, silencing the library (and anything else logging through loguru)."""
    logger.remove()


def enable_debug_logging() -> None:
    """Equivalent to `configure_logger("DEBUG")`."""
    configure_logger("DEBUG")


__all__ = [
    "DEFAULT_FORMAT",
    "LogLevel",
    "configure_logger",
    "disable_logging",
    "enable_debug_logging",
]
