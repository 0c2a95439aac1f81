# -*- coding: utf-8 -*-
"""
Logging configuration for the document management console.

All modules log through children of the ``docmanagement`` logger:

    from utils.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "docmanagement"

# Will be set by setup_logger
_logger: Optional[logging.Logger] = None


def setup_logger(
    logs_dir: Optional[Path] = None,
    console_level: int = logging.INFO
) -> logging.Logger:
    """
    Setup the application logger with a rotating file handler and a console handler.

    Args:
        logs_dir: Directory for the log file (defaults to Config.LOGS_DIR)
        console_level: Minimum level printed to stdout

    Returns:
        The configured root application logger
    """
    global _logger

    # Import here to avoid circular imports
    from app.config import Config

    logs_dir = Path(logs_dir) if logs_dir else Config.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    file_handler = RotatingFileHandler(
        logs_dir / Config.LOG_FILE,
        maxBytes=Config.LOG_MAX_BYTES,
        backupCount=Config.LOG_BACKUP_COUNT,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)-8s | %(name)s | %(message)s"))
    logger.addHandler(console_handler)

    logger.info(f"{Config.APP_NAME} v{Config.VERSION} logging to {logs_dir / Config.LOG_FILE}")
    _logger = logger
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger for a module, configuring the application logger on first use.
    """
    global _logger

    if _logger is None:
        _logger = setup_logger()

    return _logger.getChild(name)
