"""
Structured logging system for vmcompat.

Messages go to stderr (stdout carries command output) and, when a log
directory is configured, to a daily file. Download and resolution counters
let a test run report how its version mapping was obtained.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _with_format(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=DATE_FORMAT))
    return handler


class StructuredLogger:
    """Wraps a stdlib logger; keyword context is appended as JSON."""

    def __init__(
        self,
        name: str = "vmcompat",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
    ):
        """
        Args:
            name: Logger name
            level: Console level name; the file always gets DEBUG
            log_dir: Directory for vmcompat_YYYYMMDD.log (default: logs/)
            enable_file: Also write to the daily file
            enable_console: Write to stderr
        """
        numeric_level = getattr(logging, level.upper())
        self.logger = logging.getLogger(name)
        self.logger.setLevel(numeric_level)
        self.logger.handlers.clear()
        self.logger.propagate = False

        self.metrics = {
            "downloads_attempted": 0,
            "downloads_successful": 0,
            "downloads_failed": 0,
            "errors_by_type": {},
            "resolutions": 0,
        }

        if enable_console:
            self.logger.addHandler(
                _with_format(logging.StreamHandler(sys.stderr), numeric_level, CONSOLE_FORMAT)
            )

        if enable_file:
            log_dir = log_dir or Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file = log_dir / f"vmcompat_{datetime.now().strftime('%Y%m%d')}.log"
            self.logger.addHandler(
                _with_format(logging.FileHandler(log_file, encoding='utf-8'), logging.DEBUG, FILE_FORMAT)
            )

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_download_attempt(self):
        self.metrics["downloads_attempted"] += 1

    def record_download_success(self):
        self.metrics["downloads_successful"] += 1

    def record_download_failure(self, error_type: str):
        """Record a failed download, grouped by error type."""
        self.metrics["downloads_failed"] += 1
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def record_resolution(self):
        self.metrics["resolutions"] += 1

    def get_metrics(self) -> dict:
        """Return a copy of current metrics."""
        metrics_copy = dict(self.metrics)
        metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])
        return metrics_copy

    def log_metrics_summary(self):
        m = self.get_metrics()
        self.info(
            f"Downloads: {m['downloads_successful']}/{m['downloads_attempted']} successful, "
            f"resolutions: {m['resolutions']}",
            errors_by_type=m["errors_by_type"],
        )


_global_logger: Optional[StructuredLogger] = None


def get_logger(name: str = "vmcompat", level: str = "INFO", **kwargs) -> StructuredLogger:
    """Return the process-wide logger, creating it from these arguments on first call."""
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Drop the process-wide logger so the next get_logger() builds a fresh one."""
    global _global_logger
    _global_logger = None
