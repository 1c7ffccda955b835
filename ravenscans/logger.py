"""
Logging configuration for the RavenScans source.

The console handler writes to stdout by default; command-line runners that
print results on stdout pass stream=sys.stderr.
"""

import logging
import sys
from typing import Optional, TextIO


def setup_logger(
    name: str = "ravenscans",
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Set up and return the package logger.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional file path for logging
        stream: Console stream (default: sys.stdout)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Handlers are attached once; later calls retune level and console stream
    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
            if stream is not None and type(handler) is logging.StreamHandler:
                handler.setStream(stream)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """Return the "ravenscans.<module_name>" child logger."""
    return logging.getLogger(f"ravenscans.{module_name}")
