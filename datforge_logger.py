# -*- coding: utf-8 -*-
"""
DatForge Central Logging Module

Standard logging configuration for the whole application.
Log files are kept under ~/.datforge/logs/.

Handlers are only configured on the root 'datforge' logger.
Child loggers propagate to root and do not add handlers themselves.
"""

import logging
from datetime import datetime

from datforge_config import LOG_DIR

# Log file name (one per day)
LOG_FILE = LOG_DIR / f"datforge_{datetime.now().strftime('%Y%m%d')}.log"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_root_configured = False


def _configure_root_logger():
    """Configure the root 'datforge' logger with handlers (once only)."""
    global _root_configured
    if _root_configured:
        return

    root_logger = logging.getLogger("datforge")
    root_logger.setLevel(logging.DEBUG)

    # Prevent propagation to Python's root logger to avoid duplicates
    root_logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console_handler)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
    except OSError as e:
        root_logger.warning(f"File logging disabled, cannot open {LOG_FILE}: {e}")
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root_logger.addHandler(file_handler)

    _root_configured = True


_configure_root_logger()
logger = logging.getLogger("datforge")


def get_logger(name: str) -> logging.Logger:
    """
    Return a child logger for a module.

    Child loggers do NOT add handlers - they propagate to the root 'datforge' logger.

    Args:
        name: Module name

    Returns:
        Logger named datforge.{name}
    """
    _configure_root_logger()
    return logging.getLogger(f"datforge.{name}")
