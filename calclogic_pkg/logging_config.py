"""Structured logging configuration for calclogic.

Modules log through ``get_logger(<module>)`` under the ``calclogic``
namespace and never install handlers themselves. The host application calls
``setup_logging`` once (``api.configure_logging`` does this from the
``CALCLOGIC_LOG_LEVEL`` and ``CALCLOGIC_LOG_FILE`` settings).
"""

import logging
import sys
import threading
from datetime import datetime
from typing import Optional

from .config import LOG_FILE, LOG_LEVEL

ROOT_LOGGER = "calclogic"


class StructuredFormatter(logging.Formatter):
    """One line per record: timestamp, level, logger and message.

    Records emitted off the main thread (curve sampling) carry the thread
    name, and tracebacks are appended below the line.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        name = record.name
        if record.threadName and record.threadName != threading.main_thread().name:
            name = f"{name} ({record.threadName})"
        line = f"{timestamp} [{record.levelname}] {name}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: Optional[str] = None, log_file: Optional[str] = None
) -> logging.Logger:
    """Set up structured logging for the package.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Logging level name (default: the CALCLOGIC_LOG_LEVEL setting)
        log_file: Extra file to write to (default: the CALCLOGIC_LOG_FILE
            setting); records always go to stderr

    Returns:
        The package root logger
    """
    level = level or LOG_LEVEL
    log_file = log_file or LOG_FILE

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = StructuredFormatter()
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "") -> logging.Logger:
    """Logger for a package module, or the package root for an empty name."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)
