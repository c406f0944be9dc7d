"""
Logging configuration for the site content library.

One package logger ("vidyapith_content") owns the handlers; every module logs
through a child of it, so a single setup_logger() call controls the output of
extractors, the service and the stores alike.
"""

import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "vidyapith_content"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Union[int, str, None], default: int = logging.INFO) -> int:
    """
    Accept a logging level as an int or a name ("debug", "WARNING").

    Unknown names fall back to `default`; a typo in VIDYAPITH_LOG_LEVEL
    should not stop the scraper.
    """
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else default


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and return a logger instance.

    Args:
        name: Logger name
        level: Logging level as int or level name (default: INFO)
        log_file: Optional file path for logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    resolved = resolve_level(level)
    logger.setLevel(resolved)

    # Calling again (e.g. from run_scraper.py with a new level) only adjusts
    # levels and adds a file handler that was not there before
    if not logger.handlers:
        logger.addHandler(_handler(logging.StreamHandler(sys.stdout), resolved))
    else:
        for handler in logger.handlers:
            handler.setLevel(resolved)

    has_file_handler = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    if log_file and not has_file_handler:
        logger.addHandler(_handler(logging.FileHandler(log_file), resolved))

    return logger


# Default logger instance, created once at import time
logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a child logger for a specific module.

    Child loggers (e.g. "vidyapith_content.donate") inherit the package
    logger's handlers and level; the name in each line tells which extractor
    or service produced it.

    Args:
        module_name: Name of the module (e.g., 'content_service', 'events')

    Returns:
        Child logger instance
    """
    return logging.getLogger(f"{PACKAGE_LOGGER}.{module_name}")
