"""Utility functions for entity-store."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Configure loguru sinks.

    Removes the default handler, logs to stderr and, when ``log_file`` is
    given, to a rotating file as well.
    """
    logger.remove()

    logger.add(sys.stderr, level=level, backtrace=True, diagnose=False, colorize=True)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level=level,
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
        )

    logger.debug(f"Logging configured: level={level} file={log_file}")


def json_kind(value: object) -> str:
    """Name the JSON kind of a decoded value.

    Examples:
        >>> json_kind("a")
        'string'
        >>> json_kind(True)
        'boolean'
        >>> json_kind(1.5)
        'number'
    """
    if value is None:
        return "null"
    # bool before int, bool is an int subclass
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    return "object"
