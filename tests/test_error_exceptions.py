"""
Unit tests for error handling exceptions.
"""

from datetime import datetime
from pathlib import Path

import pytest

from bddreport.error_handling.exceptions import (
    AssetsUnavailableError,
    FatalReportError,
    InputUnreadableError,
    OutputWriteError,
    RecoverableReportError,
    ReportError,
)


class TestReportError:
    """Test base exception class."""

    def test_basic_creation(self):
        """Test basic error creation."""
        error = ReportError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.error_code == "ReportError"
        assert error.details == {}
        assert error.cause is None
        assert isinstance(error.timestamp, datetime)

    def test_with_details(self):
        """Test error with details."""
        details = {"key": "value", "count": 42}
        error = ReportError("Test error", error_code="TEST001", details=details)
        assert error.error_code == "TEST001"
        assert error.details == details

    def test_with_cause(self):
        """The cause is kept and shown in the message."""
        cause = ValueError("Original error")
        error = ReportError("Wrapped error", cause=cause)
        assert error.cause is cause
        assert str(error) == "Wrapped error: Original error"

    def test_to_dict(self):
        """Test conversion to dictionary."""
        error = ReportError(
            "Test error",
            error_code="TEST001",
            details={"key": "value"},
            cause=OSError("disk"),
        )

        result = error.to_dict()
        assert result["error_type"] == "ReportError"
        assert result["error_code"] == "TEST001"
        assert result["message"] == "Test error"
        assert result["details"] == {"key": "value"}
        assert "timestamp" in result
        assert result["cause"] == "disk"


class TestErrorTypes:
    """Test specific error types."""

    def test_input_unreadable_error(self):
        error = InputUnreadableError(
            "Cannot read results", path="reports/test-results/results.json"
        )
        assert isinstance(error, FatalReportError)
        assert error.path == Path("reports/test-results/results.json")
        assert error.details["path"] == "reports/test-results/results.json"
        assert error.error_code == "InputUnreadableError"

    def test_input_unreadable_keeps_extra_details(self):
        error = InputUnreadableError(
            "Bad shape", path="r.json", details={"validation_errors": 3}
        )
        assert error.details == {"validation_errors": 3, "path": "r.json"}

    def test_output_write_error(self):
        error = OutputWriteError("Cannot write", path=Path("out/report.html"))
        assert isinstance(error, FatalReportError)
        assert error.details["path"] == "out/report.html"

    def test_assets_unavailable_error(self):
        error = AssetsUnavailableError("No screenshots", directory="reports/screenshots")
        assert isinstance(error, RecoverableReportError)
        assert not isinstance(error, FatalReportError)
        assert error.directory == Path("reports/screenshots")
        assert error.details["directory"] == "reports/screenshots"


class TestErrorInheritance:
    """Test error inheritance hierarchy."""

    @pytest.mark.parametrize(
        "error",
        [
            InputUnreadableError("x", path="p"),
            OutputWriteError("x", path="p"),
            AssetsUnavailableError("x", directory="d"),
        ],
    )
    def test_all_inherit_from_base(self, error):
        assert isinstance(error, ReportError)
        assert isinstance(error, Exception)

    def test_catching_by_category(self):
        with pytest.raises(FatalReportError):
            raise OutputWriteError("x", path="p")

        with pytest.raises(RecoverableReportError):
            raise AssetsUnavailableError("x", directory="d")
