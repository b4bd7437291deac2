"""
Utility helpers that do not belong to the physics modules.
"""

import logging
import os
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None,
                  log_format: str = DEFAULT_LOG_FORMAT) -> None:
    """
    Configure the root logger with a console handler and, optionally, a
    file handler.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ...)
        log_file: Path of a log file; its directory is created if needed
        log_format: Format string shared by all handlers
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
