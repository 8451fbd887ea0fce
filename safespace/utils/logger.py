"""
Logging
Configures the application logger shared by the store and the state controller.
"""

import logging
import sys
from pathlib import Path
from .config import settings


def setup_logger(name: str = "safespace") -> logging.Logger:
    """
    Build the application logger.

    Args:
        name: logger name

    Returns:
        the configured logger
    """
    level = getattr(logging, settings.log_level.upper())

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # drop handlers from a previous setup
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if settings.log_file:
        log_dir = Path(settings.log_file).parent
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


logger = setup_logger()
