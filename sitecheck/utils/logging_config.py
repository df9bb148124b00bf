"""Logging configuration for the Company Website Tracker."""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any, Optional


LOGGER_NAME = 'sitecheck'


def setup_logging(config: Dict[str, Any], level_override: Optional[str] = None) -> logging.Logger:
    """Set up logging based on configuration.

    Args:
        config: Logging configuration section
        level_override: Replaces the configured level for the logger and all handlers

    Returns:
        Configured logger instance
    """
    log_level = level_override or config.get('level', 'INFO')
    log_format = config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    log_file = config.get('file', 'logs/sitecheck.log')
    level = getattr(logging, str(log_level).upper())

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger

