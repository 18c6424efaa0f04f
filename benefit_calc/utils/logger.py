"""Centralized logging configuration for the benefit calculation engine."""

import logging
import os
from datetime import datetime

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Directory for optional daily log files; unset means console only
LOG_DIR_ENV = "BENEFIT_CALC_LOG_DIR"


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Create a configured logger instance.

    Args:
        name: Logger name (typically __name__ from the calling module).
        level: Logging level (default INFO).

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers on repeated setup
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_dir = os.environ.get(LOG_DIR_ENV, "")
    if log_dir and os.path.isdir(log_dir):
        file_handler = logging.FileHandler(
            os.path.join(log_dir, f"benefit_calc_{datetime.now().strftime('%Y%m%d')}.log"),
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def set_level(level: int) -> None:
    """Change the level of every benefit_calc logger and its handlers."""
    for name, obj in logging.Logger.manager.loggerDict.items():
        if name.startswith("benefit_calc") and isinstance(obj, logging.Logger):
            obj.setLevel(level)
            for handler in obj.handlers:
                if isinstance(handler, logging.StreamHandler) and not isinstance(
                    handler, logging.FileHandler
                ):
                    handler.setLevel(level)
