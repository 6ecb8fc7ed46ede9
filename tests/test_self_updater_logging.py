"""Unit tests for the logging configuration module."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from self_updater.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Reset root logger state before and after each test."""
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level
    logging.root.handlers.clear()
    yield
    logging.root.handlers.clear()
    logging.root.handlers.extend(original_handlers)
    logging.root.setLevel(original_level)


def _settings(level: str, development: bool = False) -> MagicMock:
    mock_settings = MagicMock()
    mock_settings.log_level = level
    mock_settings.is_development = development
    return mock_settings


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_uses_configured_level(self):
        with patch("self_updater.logging.get_settings", return_value=_settings("DEBUG", True)):
            with patch("self_updater.logging.logging.basicConfig") as mock_basic:
                setup_logging()

        assert mock_basic.call_args.kwargs["level"] == logging.DEBUG

    def test_invalid_level_defaults_to_info(self):
        with patch("self_updater.logging.get_settings", return_value=_settings("NONEXISTENT")):
            with patch("self_updater.logging.logging.basicConfig") as mock_basic:
                setup_logging()

        assert mock_basic.call_args.kwargs["level"] == logging.INFO

    def test_quiets_access_log(self):
        with patch("self_updater.logging.get_settings", return_value=_settings("DEBUG")):
            setup_logging()

        assert logging.getLogger("aiohttp.access").level == logging.WARNING


class TestGetLogger:
    """Tests for get_logger."""

    def test_returns_bound_logger(self):
        log = get_logger("self_updater.test")
        assert hasattr(log, "info")
        assert hasattr(log, "debug")
