"""
Shared fixtures for report builder tests.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from bddreport.config.settings import Settings

VALID = "Successful login with valid credentials"
INVALID = "Login with invalid credentials"


def make_spec(
    title: str,
    status: Optional[str] = "passed",
    duration: Optional[float] = 0,
    error: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Spec node in the Playwright reporter shape."""
    result: Dict[str, Any] = {"status": status, "duration": duration, "retry": 0}
    if error is not None:
        result["error"] = {"message": error, "stack": f"Error: {error}"}
    return {
        "title": title,
        "ok": status != "failed",
        "tags": tags or [],
        "tests": [
            {
                "projectName": "chromium",
                "status": "expected" if status == "passed" else "unexpected",
                "results": [result],
            }
        ],
    }


@pytest.fixture
def login_results() -> Dict[str, Any]:
    """One suite with a passing and a failing login scenario."""
    return {
        "config": {"version": "1.45.0"},
        "suites": [
            {
                "title": "sharedo-login.feature.spec.js",
                "specs": [],
                "suites": [
                    {
                        "title": "Sharedo Login",
                        "specs": [
                            make_spec(VALID, "passed", 1200),
                            make_spec(INVALID, "failed", 900, error="auth failed"),
                        ],
                    }
                ],
            }
        ],
        "stats": {"expected": 1, "unexpected": 1, "skipped": 0, "flaky": 0},
    }


@pytest.fixture
def settings_factory(tmp_path: Path):
    """Build Settings rooted in a temporary reports directory."""

    def _factory(payload: Optional[Dict[str, Any]] = None, **overrides: Any) -> Settings:
        settings = Settings(reports_root=tmp_path / "reports", **overrides)
        if payload is not None:
            settings.results_file.parent.mkdir(parents=True, exist_ok=True)
            settings.results_file.write_text(json.dumps(payload), encoding="utf-8")
        return settings

    return _factory


@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2024, 5, 1, 12, 30, 0)
