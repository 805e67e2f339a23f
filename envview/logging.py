"""
Logging setup for envview.

All loggers live under the ``envview`` namespace. The console handler colors
level names; the optional file handler writes plain text with line numbers.
"""

import copy
import logging
import sys
from typing import Optional

_RESET = "\033[0m"

_LEVEL_COLORS = {
    logging.DEBUG: "\033[2m\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1m\033[41m\033[37m",
}

_CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
_CONSOLE_DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps the level name in an ANSI color."""

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        if color is None:
            return super().format(record)
        # Other handlers share the record; color a copy only.
        colored = copy.copy(record)
        colored.levelname = f"{color}{record.levelname}{_RESET}"
        return super().format(colored)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the ``envview`` logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a UTF-8 log file
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    package_logger = logging.getLogger("envview")
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(numeric_level)
    if numeric_level <= logging.DEBUG:
        console.setFormatter(ColoredFormatter(_CONSOLE_DEBUG_FORMAT, datefmt="%H:%M:%S"))
    else:
        console.setFormatter(ColoredFormatter(_CONSOLE_FORMAT))
    package_logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(ColoredFormatter(_FILE_FORMAT, use_colors=False))
        package_logger.addHandler(file_handler)

    # python-dotenv warns once per unparsable comment line
    logging.getLogger("dotenv").setLevel(logging.ERROR)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name``, moved under the ``envview`` namespace."""
    if not name.startswith("envview"):
        name = f"envview.{name}"
    return logging.getLogger(name)


def format_exception_summary(error: BaseException, *, max_length: int = 180) -> str:
    """
    One-line ``ExceptionName: detail`` text for user-facing errors.

    Whitespace in the detail is collapsed and the result is cut to
    ``max_length`` characters with a trailing ``...``.
    """
    detail = " ".join(str(error or "").split())
    summary = f"{type(error).__name__}: {detail}" if detail else type(error).__name__
    if max_length > 3 and len(summary) > max_length:
        summary = summary[: max_length - 3].rstrip() + "..."
    return summary


def configure_logging_from_args(
    verbose: bool = False,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """Pick the level from CLI flags (``--log-level`` beats ``--verbose``) and set up logging."""
    if log_level:
        level = log_level.upper()
    else:
        level = "DEBUG" if verbose else "INFO"
    setup_logging(level=level, log_file=log_file)
