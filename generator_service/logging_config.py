"""
logging_config.py — Centralized Logging Configuration for the Generator Service

This module configures unified logging behavior for the entire application.
It ensures that all modules log messages consistently to the console and,
if configured, to a file.

Features:
    • Console output (stdout) plus optional file output
    • Process ID tagging for multi-process visibility
    • Standardized log format for all modules
    • Reduced verbosity for the uvicorn access log
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - [PID:%(process)d] - %(message)s'


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Configures the global logging system for the application.

    Args:
        level (str): Log level name for the root logger (e.g. "INFO", "DEBUG").
        log_file (str | None): Path of a persistent log file. If omitted, logs
            are only written to stdout.

    Notes:
        - `logging.basicConfig` is a no-op once the root logger has handlers,
          so calling this from every `create_app()` is safe.
    """
    handlers = [
        # Console output (stdout, Docker-compatible)
        logging.StreamHandler(sys.stdout)
    ]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )

    # Every request would otherwise produce an access log line
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name):
    """
    Returns a logger instance for a given module or component name.

    Args:
        name (str): The logger name, typically the module's __name__.

    Returns:
        logging.Logger: A logger that follows the global format and handlers.
    """
    return logging.getLogger(name)
