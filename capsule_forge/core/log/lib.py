"""Core logging implementation for capsule-forge."""

import logging
import sys
from typing import Optional

__all__ = ["get_logger", "setup_logging", "parse_level"]


def parse_level(level: int | str) -> int:
    """Resolve a level name (``"debug"``, ``"INFO"``) or number to an int.

    Unknown names resolve to ``logging.INFO``.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level, as a number or a level name.
        stream: Output stream.
    """
    logging.basicConfig(
        level=parse_level(level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or "capsule-forge")
