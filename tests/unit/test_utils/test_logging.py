"""Tests for logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from opsrelay.config.settings import LoggingConfig
from opsrelay.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_logger():
    app_logger = logging.getLogger("opsrelay")
    saved = (list(app_logger.handlers), app_logger.level)
    yield
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    for handler in saved[0]:
        app_logger.addHandler(handler)
    app_logger.setLevel(saved[1])


class TestSetupLogging:
    def test_sets_level(self) -> None:
        setup_logging(LoggingConfig(level="debug"))
        assert logging.getLogger("opsrelay").level == logging.DEBUG

    def test_repeated_calls_do_not_duplicate_handlers(self) -> None:
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("opsrelay").handlers) == 1

    def test_file_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "relay.log"
        setup_logging(LoggingConfig(file=str(log_file)))
        setup_logging(LoggingConfig(file=str(log_file)))

        handlers = logging.getLogger("opsrelay").handlers
        assert len(handlers) == 2
        assert sum(isinstance(h, logging.FileHandler) for h in handlers) == 1
        assert "Logging initialized" in log_file.read_text()
