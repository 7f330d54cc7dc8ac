"""Logging configuration for the intlang command line."""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure the root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.  If None, logs go to stderr
            so they never mix with program output.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    config: dict = {
        "level": numeric_level,
        "format": LOG_FORMAT,
        "force": True,
    }
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        config["filename"] = log_file
    else:
        config["stream"] = sys.stderr

    logging.basicConfig(**config)
    logging.getLogger(__name__).debug("Logging initialized at %s level", level.upper())
