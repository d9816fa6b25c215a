"""
Exception hierarchy for report generation.

Fatal errors abort the build and surface their underlying cause. Recoverable
errors are raised close to the failing resource and absorbed by the caller,
which logs them and continues with degraded data.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union


class ReportError(Exception):
    """Base exception for all report builder errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None
        }


class FatalReportError(ReportError):
    """Base class for errors that terminate the build."""
    pass


class RecoverableReportError(ReportError):
    """Base class for errors that degrade the report instead of aborting it."""
    pass


class InputUnreadableError(FatalReportError):
    """The primary results document is missing, malformed or has the wrong shape."""

    def __init__(
        self,
        message: str,
        path: Union[str, Path],
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.path = Path(path)
        self.details.update({"path": str(self.path)})


class OutputWriteError(FatalReportError):
    """A generated document could not be written."""

    def __init__(
        self,
        message: str,
        path: Union[str, Path],
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.path = Path(path)
        self.details.update({"path": str(self.path)})


class AssetsUnavailableError(RecoverableReportError):
    """The screenshot directory is missing or cannot be listed."""

    def __init__(
        self,
        message: str,
        directory: Union[str, Path],
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.directory = Path(directory)
        self.details.update({"directory": str(self.directory)})
