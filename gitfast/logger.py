"""
Structured logging system for gitfast.

Provides centralized logging with console and file outputs, and
metrics tracking for monitoring scrape runs against the GitHub API.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for monitoring search and profile resolution.
    """

    def __init__(
        self,
        name: str = "gitfast",
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

        # Resolver workers record metrics concurrently
        self._lock = threading.Lock()
        self.metrics = {
            "api_calls": 0,
            "rate_limit_waits": 0,
            "queries_run": 0,
            "profiles_attempted": 0,
            "profiles_resolved": 0,
            "profiles_failed": 0,
            "profiles_filtered": 0,
            "errors_by_type": {},
            "query_stats": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
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

            log_file = log_dir / f"gitfast_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def set_level(self, level: str):
        """Change the logger and console level (file output stays at DEBUG)."""
        self.logger.setLevel(getattr(logging, level.upper()))
        for handler in self.logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(getattr(logging, level.upper()))

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
        """Internal logging method with context."""
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_api_call(self):
        """Increment API call counter."""
        with self._lock:
            self.metrics["api_calls"] += 1

    def record_rate_limit_wait(self):
        """Record one back-off wait caused by the rate limit."""
        with self._lock:
            self.metrics["rate_limit_waits"] += 1

    def record_query(self, query: str, pages: int, items: int):
        """Record the outcome of one paginated search query."""
        with self._lock:
            self.metrics["queries_run"] += 1
            stats = self.metrics["query_stats"].setdefault(query, {"pages": 0, "items": 0})
            stats["pages"] += pages
            stats["items"] += items

    def record_profile_attempt(self):
        with self._lock:
            self.metrics["profiles_attempted"] += 1

    def record_profile_resolved(self):
        with self._lock:
            self.metrics["profiles_resolved"] += 1

    def record_profile_filtered(self):
        """Record a resolved profile dropped by the minimum score."""
        with self._lock:
            self.metrics["profiles_filtered"] += 1

    def record_profile_failure(self, error_type: str):
        """Record a profile that could not be resolved."""
        with self._lock:
            self.metrics["profiles_failed"] += 1
            if error_type not in self.metrics["errors_by_type"]:
                self.metrics["errors_by_type"][error_type] = 0
            self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return a snapshot of current metrics."""
        with self._lock:
            metrics_copy = dict(self.metrics)
            metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])
            metrics_copy["query_stats"] = {
                q: dict(stats) for q, stats in self.metrics["query_stats"].items()
            }

        attempts = metrics_copy["profiles_attempted"]
        metrics_copy["resolve_success_rate"] = (
            round(metrics_copy["profiles_resolved"] / attempts, 3) if attempts else 0
        )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Scrape Run Metrics ===")
        self.info(f"API Calls: {metrics['api_calls']} (rate-limit waits: {metrics['rate_limit_waits']})")
        self.info(f"Queries: {metrics['queries_run']}")
        self.info(
            f"Profiles: {metrics['profiles_resolved']}/{metrics['profiles_attempted']} "
            f"({metrics['resolve_success_rate'] * 100:.1f}% resolved, "
            f"{metrics['profiles_filtered']} below min score)"
        )

        if metrics["query_stats"]:
            self.info("Query Results:")
            for query, stats in metrics["query_stats"].items():
                self.info(f"  {query}: {stats['items']} items over {stats['pages']} pages")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "gitfast",
    level: str = "INFO",
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
