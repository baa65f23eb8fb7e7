"""Logging setup for opsrelay."""

from __future__ import annotations

import logging
import sys

from opsrelay.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Install stderr (and optionally file) handlers on the 'opsrelay' logger.

    Safe to call more than once: handlers from an earlier call are closed
    and replaced, so records are never emitted twice.
    """
    config = config or LoggingConfig()

    app_logger = logging.getLogger("opsrelay")
    app_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    for handler in handlers:
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    app_logger.info("Logging initialized at %s level", config.level)
