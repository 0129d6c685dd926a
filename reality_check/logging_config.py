"""
Logging configuration for the Reality Check service.

Centralizes handler and formatter setup so every module can simply call
``get_logger(__name__)``. The level comes from ``REALITY_CHECK_LOG_LEVEL``
(default INFO).
"""

import logging
import os

LOG_LEVEL_ENV = "REALITY_CHECK_LOG_LEVEL"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure application-wide logging.

    Installs a single console handler on the root logger, replacing any
    handlers left by a previous call.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)

    root_logger.debug("Logging configured at level: %s", level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Usually __name__ of the calling module

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
