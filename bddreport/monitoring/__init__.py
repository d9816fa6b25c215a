"""
Monitoring module exports.
"""

from bddreport.monitoring.logger import (
    ContextLogAdapter,
    JSONFormatter,
    get_logger,
    log_performance_metric,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_performance_metric",
    "JSONFormatter",
    "ContextLogAdapter",
]
