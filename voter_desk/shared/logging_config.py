"""
Common logging configuration for the voter desk
"""

import logging
import os
import sys


def setup_logger(name: str, level: str = "INFO", log_file: str = None) -> logging.Logger:
    """
    Setup a logger with consistent formatting across the desk

    Args:
        name: Logger name (typically __name__)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Handlers already attached means the logger was set up earlier
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper()))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_project_logger(module_name: str, verbose: bool = False) -> logging.Logger:
    """
    Get a logger configured for the voter desk

    Args:
        module_name: Name of the module (typically __name__)
        verbose: Enable debug level logging

    Returns:
        Configured logger that logs to stdout, and also to the file named by
        the LOG_FILE environment variable when it is set
    """
    level = "DEBUG" if verbose else "INFO"
    return setup_logger(module_name, level, log_file=os.environ.get("LOG_FILE") or None)
