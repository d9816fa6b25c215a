"""
Error handling for the report builder.

Fatal errors stop the build; recoverable errors are logged and the report is
produced with degraded data.
"""

from .exceptions import (
    ReportError,
    FatalReportError,
    RecoverableReportError,
    InputUnreadableError,
    OutputWriteError,
    AssetsUnavailableError,
)

__all__ = [
    "ReportError",
    "FatalReportError",
    "RecoverableReportError",
    "InputUnreadableError",
    "OutputWriteError",
    "AssetsUnavailableError",
]
