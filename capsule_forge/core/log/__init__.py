"""Logging micro API for capsule-forge."""

from .lib import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
