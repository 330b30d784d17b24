"""Logging setup for the ``solar_nav`` package."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "solar_nav"


def setup_logging(level: int | str = logging.INFO, log_file: str | Path | None = None) -> logging.Logger:
    """Configure the package logger with a console handler and an optional file handler."""

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # avoid duplicate handlers when called again after a restart
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized")
    return logger


__all__ = ["PACKAGE_LOGGER", "setup_logging"]
