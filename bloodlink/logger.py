"""
Centralized logging configuration for the BloodLink client.

Every module logs through the single project logger returned by
``get_logger()`` instead of creating its own.

Usage:
    ```python
    from bloodlink.logger import get_logger
    logger = get_logger()

    logger.info("Logged in as donor")
    logger.debug("Refresh already in flight, queueing request")
    ```

Configuration:
    The level is read from the LOG_LEVEL environment variable:

    - LOG_LEVEL=DEBUG: all messages, with timestamps and function info
    - LOG_LEVEL=INFO: info, warning and error messages (default)
    - LOG_LEVEL=WARNING: warnings and errors only
    - LOG_LEVEL=ERROR: errors only

    ```bash
    LOG_LEVEL=DEBUG bloodlink requests list
    ```

Logger Name:
    All loggers use the name "BLOODLINK".
"""

import os
import logging

LOGGER_NAME = "BLOODLINK"

DEFAULT_LOG_LEVEL = "INFO"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

DEBUG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
)
DEFAULT_FORMAT = "%(levelname)s: %(message)s"


def get_log_level() -> int:
    """Log level from LOG_LEVEL, INFO when unset or unknown."""
    return LOG_LEVELS.get(
        os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(), logging.INFO
    )


def setup_logger() -> logging.Logger:
    """
    Attach a stderr handler to the project logger, once.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    log_level = get_log_level()
    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(
        logging.Formatter(DEBUG_FORMAT if log_level == logging.DEBUG else DEFAULT_FORMAT)
    )

    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False
    return logger


def get_logger() -> logging.Logger:
    return setup_logger()
