"""
Structured logging for ami-helper.

Console output goes to stderr so that stdout stays free for the selected AMIs.
Also tracks lookup metrics so a run can report how the parameter sources
behaved.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Logger wrapper that appends keyword context as JSON.
    Tracks metrics for parameter lookups and per-family selection.
    """

    def __init__(
        self,
        name: str = "amihelper",
        level: str = "WARNING",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to a daily file
            enable_console: Write logs to stderr
        """
        self.logger = logging.getLogger(name)
        self.metrics = {}
        self.reset_metrics()
        self.configure(level, log_dir=log_dir, enable_file=enable_file, enable_console=enable_console)

    def configure(
        self,
        level: str = "WARNING",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
    ):
        """Replace the handlers, e.g. once command line options are known."""
        level_number = getattr(logging, level.upper())
        self.logger.setLevel(logging.DEBUG if enable_file else level_number)
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)
        self.logger.propagate = False

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level_number)
            console_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"amihelper_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def reset_metrics(self):
        self.metrics = {
            "lookups_attempted": 0,
            "lookups_successful": 0,
            "lookups_failed": 0,
            "parameters_fetched": 0,
            "errors_by_type": {},
            "families": {},
        }

    def record_lookup_attempt(self, path: str):
        """Record a lookup against a parameter path."""
        self.metrics["lookups_attempted"] += 1

    def record_lookup_success(self, path: str, count: int):
        self.metrics["lookups_successful"] += 1
        self.metrics["parameters_fetched"] += count

    def record_lookup_failure(self, path: str, error_type: str):
        self.metrics["lookups_failed"] += 1
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def record_family(self, family: str, fetched: int, selected: int):
        """Record how many candidates a family pass produced and kept."""
        self.metrics["families"][family] = {"fetched": fetched, "selected": selected}

    def get_metrics(self) -> dict:
        """Return a copy of the current metrics."""
        metrics = dict(self.metrics)
        metrics["errors_by_type"] = dict(self.metrics["errors_by_type"])
        metrics["families"] = {k: dict(v) for k, v in self.metrics["families"].items()}
        return metrics

    def log_metrics_summary(self):
        metrics = self.get_metrics()
        self.info("=== Lookup Metrics ===")
        self.info(
            f"Lookups: {metrics['lookups_successful']}/{metrics['lookups_attempted']} "
            f"({metrics['parameters_fetched']} parameters)"
        )
        for family, stats in metrics["families"].items():
            self.info(f"  {family}: {stats['selected']} of {stats['fetched']} selected")
        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "amihelper",
    level: str = "WARNING",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
