"""Logging for mocap_stitch: colored console output plus an optional log file"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO


LOGGER_NAMESPACE = "mocap_stitch"

CONSOLE_FORMAT = "%(asctime)s │ %(levelname)-8s │ %(name)-24s │ %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-24s | %(message)s"


class ColoredFormatter(logging.Formatter):
    """Colored log output for terminal."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Color a copy; file handlers see the same record and want plain text
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        record.name = f"\033[34m{record.name}{self.RESET}"
        return super().format(record)


def _file_handler(log_file: str, log_dir: str) -> logging.FileHandler:
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    handler = logging.FileHandler(log_path / f"{log_file}_{timestamp}.log", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: str = "logs",
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Configure the mocap_stitch logger tree.

    Handlers are installed once; later calls only change the level. Call
    reset_logging() first to install fresh handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file name, written as <log_dir>/<name>_<timestamp>.log
        log_dir: Directory for log files
        stream: Console stream, sys.stdout when omitted

    Returns:
        The namespace logger
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(getattr(logging, level.upper()))

    if logger.handlers:
        return logger

    console = logging.StreamHandler(stream or sys.stdout)
    console.setLevel(logging.DEBUG)
    console.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(console)

    if log_file:
        handler = _file_handler(log_file, log_dir)
        logger.addHandler(handler)
        logger.info(f"Logging to file: {handler.baseFilename}")

    return logger


def reset_logging() -> None:
    """Close and remove every handler installed by setup_logging()."""
    logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger under the mocap_stitch namespace.

    Args:
        name: Module name (e.g., "bvh.reader", "motion.blend")

    Returns:
        Logger instance
    """
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
