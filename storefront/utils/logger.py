"""
Logging for the storefront.

Everything logs under the ``storefront`` logger. The handler writes to stderr
so the CLI's stdout carries only command output. The level comes from
``LOG_LEVEL`` and can be changed later with ``configure_logging``.
"""
import logging
import os
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("storefront")
_handler: Optional[logging.Handler] = None


def configure_logging(level: Union[str, int, None] = None) -> logging.Logger:
    """
    Attach the storefront handler once and set the level.

    ``level`` falls back to ``LOG_LEVEL`` (default INFO). Calling again only
    changes the level.
    """
    global _handler
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.upper()
        if not isinstance(logging.getLevelName(level), int):
            level = "INFO"

    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(_handler)
        # Storefront records stay on this handler only
        logger.propagate = False

    logger.setLevel(level)
    return logger


def get_logger(name: str = None) -> logging.Logger:
    """Logger for one area of the storefront, e.g. ``get_logger("data.cart")``."""
    if name:
        return logging.getLogger(f"storefront.{name}")
    return logger


configure_logging()
