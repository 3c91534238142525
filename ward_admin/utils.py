"""Logging helpers shared by every module."""
import logging
from typing import Optional

from ward_admin.core import config

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

ROOT_LOGGER = "ward_admin"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a console handler to the package logger.

    Args:
        level: Logging level name; defaults to ``config.LOG_LEVEL``

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)

    level_upper = (level or config.LOG_LEVEL).upper()
    if not hasattr(logging, level_upper):
        raise ValueError(
            f"Invalid log level: {level_upper}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    logger.setLevel(getattr(logging, level_upper))

    # Prevent duplicate handlers on reload
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger by name.

    Module names under ``ward_admin`` inherit the package handler.
    """
    return logging.getLogger(name)
