"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, parse_level, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("test")
        assert logger.name == "test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "capsule-forge"

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """Verify logging setup accepts level names."""
        stream = StringIO()
        setup_logging(level="debug", stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op once logging is configured, so only the
        # API contract is checked here.
        assert logger.level == logging.NOTSET

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("debug", logging.DEBUG),
            (" WARNING ", logging.WARNING),
            (logging.ERROR, logging.ERROR),
            ("nonsense", logging.INFO),
        ],
    )
    def test_parse_level(self, raw, expected) -> None:
        """Level names and numbers resolve to logging constants."""
        assert parse_level(raw) == expected
