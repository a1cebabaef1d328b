# File: promptly/utils/logger.py
"""
Centralized logging configuration for Promptly.
"""

import logging
import os
import sys
from pathlib import Path
from datetime import datetime

def setup_logger(name: str = "promptly", level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    console_format = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler for persistent logs; PROMPTLY_LOG_DIR="" disables it
    log_dir_setting = os.getenv("PROMPTLY_LOG_DIR", "logs")
    if log_dir_setting:
        log_dir = Path(log_dir_setting)
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f"promptly_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)

        # Per-candidate detail only goes to the file
        file_format = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger
