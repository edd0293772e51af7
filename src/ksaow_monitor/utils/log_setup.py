"""Logging configuration for service and console modes."""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "ksaow-monitor.log"
RETAINED_LOG_FILES = 2


def _reset_root(level: str) -> logging.Logger:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return root


def configure_service_logging(log_dir: Path, level: str = "INFO") -> Path:
    """Log to a file rotated at midnight, keeping two files."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME
    handler = TimedRotatingFileHandler(
        log_path, when="midnight", backupCount=RETAINED_LOG_FILES, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    _reset_root(level).addHandler(handler)
    return log_path


def configure_console_logging(level: str = "INFO", console: Console | None = None) -> None:
    """Log through rich to stderr."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        log_time_format="[%X]",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    _reset_root(level).addHandler(handler)
