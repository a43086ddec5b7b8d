"""Logging configuration for hosts embedding the engine."""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the ``castle_engine`` namespace."""
    return logging.getLogger(name or "castle_engine")


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a stdout handler to the package logger.

    Args:
        level: Level name; defaults to the LOG_LEVEL environment variable, then INFO.

    Returns:
        The configured package logger
    """
    logger = get_logger()
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    return logger
