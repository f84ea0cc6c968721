# src/calphadg/utils/logging.py


"""Logging for calphadg.

Every module logs through the package logger. Warnings report geometric
problems found while sampling (clamped bounds, draws that do not embed in
3D); info lines report the progress of long sampling runs.
"""

import logging
import sys
from typing import Optional, TextIO, Union

LOGGER_NAME = "calphadg"

# verbose -> (format, date format)
_FORMATS = {
    False: ("%(asctime)s | %(levelname)s | %(message)s", "%H:%M:%S"),
    True: (
        "%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s",
        "%Y-%m-%d %H:%M:%S",
    ),
}


def _as_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logger(
    name: str = LOGGER_NAME,
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    verbose: bool = False,
) -> logging.Logger:
    """Configure and return a logger instance.

    Calling it again replaces the handlers of the named logger.

    Args:
        name: Logger name.
        level: Logging level, by name (DEBUG, INFO, WARNING, ERROR) or number.
        log_file: Optional file path to write logs.
        verbose: If True, show more details (module, line number).

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_as_level(level))
    logger.handlers.clear()

    fmt, datefmt = _FORMATS[bool(verbose)]
    formatter = logging.Formatter(fmt, datefmt=datefmt)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# Package logger, configured on first use
_logger: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    """Get the package logger."""
    global _logger
    if _logger is None:
        _logger = setup_logger()
    return _logger


def set_log_level(level: Union[str, int]) -> None:
    """Change the package log level, e.g. to DEBUG for per-draw messages."""
    get_logger().setLevel(_as_level(level))


class ProgressBar:
    """ASCII progress bar for sampling loops that may stop early.

    The line is ended when ``total`` steps are reached or on ``close()``,
    whichever comes first. Also usable as a context manager.
    """

    def __init__(self, total: int, width: int = 50, prefix: str = "Sampling", stream: Optional[TextIO] = None):
        self.total = max(total, 1)
        self.width = width
        self.prefix = prefix
        self.stream = stream if stream is not None else sys.stdout
        self.current = 0
        self.closed = False

    def update(self, n: int = 1) -> None:
        """Advance by n steps and redraw."""
        self.current += n
        percent = min(self.current / self.total, 1.0)
        filled = int(self.width * percent)
        bar = "=" * filled + "-" * (self.width - filled)

        self.stream.write(f"\r{self.prefix}: [{bar}] {self.current}/{self.total} ({percent:.1%})")
        self.stream.flush()

        if self.current >= self.total:
            self.close()

    def close(self) -> None:
        """End the bar's line if anything was drawn."""
        if not self.closed and self.current > 0:
            self.stream.write("\n")
            self.stream.flush()
        self.closed = True

    def __enter__(self) -> "ProgressBar":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
