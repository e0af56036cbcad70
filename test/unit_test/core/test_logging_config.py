"""Unit tests for logging configuration module.

Tests verify the console level, line format, rotating file handler and
per-module levels that ``setup_logging`` installs.
"""

import logging
import logging.handlers
from pathlib import Path

import pytest

from portfolio_cms.core import logging_config
from portfolio_cms.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    build_logging_config,
    get_logger,
    setup_logging,
)


def _console_handler() -> logging.Handler:
    root_logger = logging.getLogger()
    return next(h for h in root_logger.handlers if type(h) is logging.StreamHandler)


class TestSetupLoggingLogLevels:
    """Test setup_logging with different log levels."""

    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_setup_logging_with_different_levels(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)
        assert _console_handler().level == expected_level

    def test_root_logger_captures_everything(self):
        setup_logging(enable_file=False)
        assert logging.getLogger().level == logging.DEBUG


class TestSetupLoggingFormats:
    """Test setup_logging with different formats."""

    @pytest.mark.parametrize(
        "log_format,expected_format",
        [("simple", SIMPLE_FORMAT), ("detailed", DETAILED_FORMAT), ("json", JSON_FORMAT), ("unknown", DETAILED_FORMAT)],
    )
    def test_setup_logging_with_different_formats(self, log_format, expected_format):
        setup_logging(log_format=log_format, enable_file=False)
        assert _console_handler().formatter._fmt == expected_format


class TestSetupLoggingFileHandling:
    """Test the rotating file handler."""

    def test_file_handler_added_when_enabled(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(logging_config.settings, "log_file_enabled", True)
        monkeypatch.setattr(logging_config.settings, "log_file_dir", str(tmp_path / "logs"))
        setup_logging(enable_file=True)

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        try:
            assert len(file_handlers) == 1
            assert isinstance(file_handlers[0], logging.handlers.RotatingFileHandler)
            assert file_handlers[0].level == logging.DEBUG
            assert Path(file_handlers[0].baseFilename) == tmp_path / "logs" / "portfolio_cms.log"
        finally:
            for handler in file_handlers:
                handler.close()
            monkeypatch.undo()
            setup_logging(enable_file=False)

    def test_no_file_handler_when_disabled(self):
        setup_logging(enable_file=False)
        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)

    def test_existing_handlers_are_replaced(self):
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)
        assert len(logging.getLogger().handlers) == 1


class TestBuildLoggingConfig:
    def test_console_only(self):
        config = build_logging_config("INFO", "simple")

        assert list(config["handlers"]) == ["console"]
        assert config["root"]["handlers"] == ["console"]
        assert config["disable_existing_loggers"] is False
        assert config["formatters"]["default"]["format"] == SIMPLE_FORMAT

    def test_file_handler_rotates(self, tmp_path: Path):
        config = build_logging_config("INFO", "json", tmp_path / "app.log")

        file_handler = config["handlers"]["file"]
        assert file_handler["class"] == "logging.handlers.RotatingFileHandler"
        assert file_handler["maxBytes"] == logging_config.settings.log_file_max_bytes
        assert config["root"]["handlers"] == ["console", "file"]


class TestModuleLevels:
    @pytest.mark.parametrize(
        "module_name",
        ["portfolio_cms", "portfolio_cms.core.cache", "sqlalchemy.engine", "httpx"],
    )
    def test_module_specific_log_levels(self, module_name):
        setup_logging(enable_file=False)
        expected = logging.getLevelName(MODULE_LOG_LEVELS[module_name])
        assert logging.getLogger(module_name).level == expected


class TestGetLogger:
    def test_same_name_returns_same_instance(self):
        assert get_logger("portfolio_cms.test") is get_logger("portfolio_cms.test")

    def test_logger_name(self):
        assert get_logger("portfolio_cms.server.services.chatbot").name == "portfolio_cms.server.services.chatbot"
