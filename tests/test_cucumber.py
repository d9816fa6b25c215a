"""
Tests for the cucumber-style JSON export.
"""

import json
from unittest.mock import patch

import pytest

from bddreport.core.types import ScenarioRecord, ScenarioStatus
from bddreport.error_handling.exceptions import OutputWriteError
from bddreport.reporting.cucumber import export_cucumber_json, slugify, to_cucumber_features
from conftest import INVALID, VALID


@pytest.fixture
def records():
    return [
        ScenarioRecord(
            title=VALID, status=ScenarioStatus.PASSED, duration_millis=1200, tags=["@smoke"]
        ),
        ScenarioRecord(
            title=INVALID,
            status=ScenarioStatus.FAILED,
            duration_millis=900.5,
            error_message="auth failed",
        ),
    ]


def test_slugify():
    assert slugify("  Login with   invalid credentials ") == "login-with-invalid-credentials"


class TestToCucumberFeatures:
    """Tests for to_cucumber_features."""

    def test_single_feature_with_one_element_per_record(self, records):
        """Every record becomes one scenario element, in order."""
        features = to_cucumber_features(
            records, feature_name="Sharedo Login", feature_id="sharedo-login"
        )

        assert len(features) == 1
        feature = features[0]
        assert feature["name"] == "Sharedo Login"
        assert feature["id"] == "sharedo-login"
        assert feature["keyword"] == "Feature"
        assert [e["id"] for e in feature["elements"]] == [
            "successful-login-with-valid-credentials",
            "login-with-invalid-credentials",
        ]

    def test_default_feature_identity(self, records):
        """Defaults match the established Sharedo feature document."""
        feature = to_cucumber_features(records)[0]

        assert feature["id"] == "sharedo-bdd-tests"
        assert feature["name"] == "Sharedo Platform BDD Tests"
        assert feature["description"] == "BDD Tests for Sharedo Platform"
        assert feature["uri"] == "features/sharedo-login.feature"

    def test_step_result(self, records):
        """Step results carry status, nanosecond duration and error."""
        elements = to_cucumber_features(records)[0]["elements"]

        passed = elements[0]["steps"][0]
        failed = elements[1]["steps"][0]
        assert passed["keyword"] == "When"
        assert passed["result"] == {
            "status": "passed",
            "duration": 1_200_000_000,
            "error_message": None,
        }
        assert failed["result"]["status"] == "failed"
        assert failed["result"]["duration"] == 900_500_000
        assert failed["result"]["error_message"] == "auth failed"

    def test_tags(self, records):
        elements = to_cucumber_features(records)[0]["elements"]

        assert elements[0]["tags"] == [{"name": "@smoke"}]
        assert elements[1]["tags"] == []

    def test_no_records(self):
        """An empty run still yields one feature with no elements."""
        assert to_cucumber_features([])[0]["elements"] == []


class TestExportCucumberJson:
    """Tests for export_cucumber_json."""

    def test_writes_document(self, tmp_path, records):
        """The export lands at the requested path, creating parents."""
        path = tmp_path / "test-results" / "cucumber-results.json"

        written = export_cucumber_json(records, path, feature_name="Run")

        assert written == path
        document = json.loads(path.read_text(encoding="utf-8"))
        assert document == to_cucumber_features(records, feature_name="Run")

    def test_write_failure_is_fatal(self, tmp_path, records):
        """Filesystem errors surface as OutputWriteError."""
        path = tmp_path / "cucumber-results.json"

        with patch("pathlib.Path.write_text", side_effect=OSError("disk full")):
            with pytest.raises(OutputWriteError) as exc_info:
                export_cucumber_json(records, path)

        assert exc_info.value.path == path
        assert exc_info.value.details["path"] == str(path)
