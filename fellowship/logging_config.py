"""Logger setup for the application package."""

from __future__ import annotations

import logging
import sys

from fellowship.config import get_settings

LOGGER_NAME = "fellowship"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a console handler to the package logger.

    Calling this more than once replaces the handler instead of stacking
    duplicates, so app factories can call it freely.
    """

    resolved_level = (level or get_settings().log_level or "INFO").upper()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved_level)

    for handler in list(logger.handlers):
        if getattr(handler, "_fellowship_console", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    console_handler._fellowship_console = True  # type: ignore[attr-defined]
    logger.addHandler(console_handler)
    return logger


__all__ = ["configure_logging", "LOGGER_NAME"]
