"""
Structured logging for the job board.

Provides one centralized logger with console and optional file output,
plus counters for remote store calls so a session's health can be reported.
"""

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks remote store calls, created rows and rejected inputs.
    """

    def __init__(
        self,
        name: str = "jobboard",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()
        self.logger.propagate = False

        self.metrics = {
            "remote_calls": 0,
            "remote_failures": 0,
            "rows_created": 0,
            "validation_failures": 0,
            "errors_by_type": {},
            "table_calls": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobboard_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # file always gets everything
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking

    def _table_stats(self, table: str) -> dict:
        return self.metrics["table_calls"].setdefault(table, {"calls": 0, "failures": 0})

    def record_remote_call(self, table: str):
        """Count one request sent to the store."""
        self.metrics["remote_calls"] += 1
        self._table_stats(table)["calls"] += 1

    def record_remote_failure(self, table: str, error_type: str):
        """Count a failed store request by table and error type."""
        self.metrics["remote_failures"] += 1
        self._table_stats(table)["failures"] += 1
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def record_row_created(self, table: str):
        self.metrics["rows_created"] += 1

    def record_validation_failure(self, operation: str):
        self.metrics["validation_failures"] += 1
        errors = self.metrics["errors_by_type"]
        key = f"validation:{operation}"
        errors[key] = errors.get(key, 0) + 1

    def get_metrics(self) -> dict:
        """Return current metrics with per-table failure rates."""
        metrics_copy = self.metrics.copy()
        for table, stats in metrics_copy["table_calls"].items():
            if stats["calls"] > 0:
                stats["failure_rate"] = round(stats["failures"] / stats["calls"], 3)
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        calls = metrics["remote_calls"]
        failures = metrics["remote_failures"]
        ok_rate = 0
        if calls > 0:
            ok_rate = round((calls - failures) / calls * 100, 1)

        self.info("=== Session Metrics ===")
        self.info(f"Remote calls: {calls - failures}/{calls} ({ok_rate}% success)")
        self.info(f"Rows created: {metrics['rows_created']}")
        self.info(f"Validation failures: {metrics['validation_failures']}")

        if metrics["table_calls"]:
            self.info("Per table:")
            for table, stats in metrics["table_calls"].items():
                rate = stats.get("failure_rate", 0) * 100
                self.info(f"  {table}: {stats['failures']}/{stats['calls']} failed ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobboard",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Level defaults to JOBBOARD_LOG_LEVEL (or INFO). File output is enabled
    only when JOBBOARD_LOG_DIR is set, unless enable_file is passed.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if level is None:
            level = os.getenv("JOBBOARD_LOG_LEVEL", "INFO")
        log_dir = os.getenv("JOBBOARD_LOG_DIR")
        kwargs.setdefault("enable_file", bool(log_dir))
        if log_dir:
            kwargs.setdefault("log_dir", Path(log_dir))
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
