"""
Logging configuration and utilities for the BDD report builder.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from bddreport.config.settings import get_settings

# Attributes present on every LogRecord; anything else arrived through `extra`.
_RESERVED_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """JSON log formatter that keeps `extra` fields."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            log_data[key] = value

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextLogAdapter(logging.LoggerAdapter):
    """Log adapter that merges fixed context into every record."""

    def process(
        self, msg: str, kwargs: Dict[str, Any]
    ) -> tuple[str, Dict[str, Any]]:
        """Add context to log records."""
        extra = dict(self.extra)
        extra.update(kwargs.get("extra", {}))
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        log_level: Logging level (defaults to settings)
        log_format: Log format 'json' or 'text' (defaults to settings)
        log_file: Optional log file path (defaults to settings)

    Returns:
        Root logger instance
    """
    settings = get_settings()

    # Use provided values or fall back to settings
    level = log_level or settings.log_level
    format_type = log_format or settings.log_format
    file_path = log_file or settings.log_file

    numeric_level = getattr(logging, level.upper())

    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Configure console handler
    if format_type == "json":
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(JSONFormatter())
    else:
        console = Console(stderr=True)
        console_handler = RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
        )

    console_handler.setLevel(numeric_level)
    root_logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)

        if format_type == "json":
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
                )
            )

        root_logger.addHandler(file_handler)

    root_logger.setLevel(numeric_level)

    logger = logging.getLogger("bddreport")
    logger.debug(
        "Logging initialized",
        extra={
            "log_level": level,
            "log_format": format_type,
            "log_file": file_path,
        },
    )

    return root_logger


def get_logger(name: str, **context: Any) -> logging.Logger:
    """
    Get a logger instance with optional context.

    Args:
        name: Logger name
        **context: Additional context to include in logs

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if context:
        return ContextLogAdapter(logger, context)

    return logger


def log_performance_metric(
    metric_name: str,
    value: float,
    unit: str = "ms",
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log a performance metric.

    Args:
        metric_name: Name of the metric
        value: Metric value
        unit: Unit of measurement
        context: Additional context
    """
    logger = logging.getLogger("bddreport.performance")

    extra = {
        "metric_name": metric_name,
        "value": value,
        "unit": unit,
    }

    if context:
        extra.update(context)

    logger.info(f"Performance metric: {metric_name}={value:.1f}{unit}", extra=extra)
