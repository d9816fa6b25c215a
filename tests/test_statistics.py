"""
Tests for aggregate statistics.
"""

import pytest

from bddreport.core.types import ScenarioRecord, ScenarioStatus
from bddreport.reporting.statistics import compute_statistics


def _record(title: str, status: ScenarioStatus, duration: float) -> ScenarioRecord:
    return ScenarioRecord(title=title, status=status, duration_millis=duration)


class TestComputeStatistics:
    """Tests for compute_statistics."""

    def test_scenario_a_counts(self):
        """One passed and one failed scenario."""
        records = [
            _record("Successful login with valid credentials", ScenarioStatus.PASSED, 1200),
            _record("Login with invalid credentials", ScenarioStatus.FAILED, 900),
        ]

        stats = compute_statistics(records)

        assert stats.total == 2
        assert stats.passed == 1
        assert stats.failed == 1
        assert stats.skipped == 0
        assert stats.total_duration_millis == 2100
        assert stats.average_duration_millis == 1050
        assert stats.success_rate == 50.0

    def test_empty_records(self):
        """No records gives zeros without dividing by zero."""
        stats = compute_statistics([])

        assert stats.total == 0
        assert stats.total_duration_millis == 0
        assert stats.average_duration_millis == 0
        assert stats.success_rate == 0.0

    @pytest.mark.parametrize(
        "statuses",
        [
            [ScenarioStatus.PASSED] * 3,
            [ScenarioStatus.SKIPPED, ScenarioStatus.FAILED],
            [ScenarioStatus.PASSED, ScenarioStatus.FAILED, ScenarioStatus.SKIPPED, ScenarioStatus.SKIPPED],
        ],
    )
    def test_counts_add_up(self, statuses):
        """passed + failed + skipped always equals total."""
        records = [_record(f"s{i}", status, 100 * (i + 1)) for i, status in enumerate(statuses)]

        stats = compute_statistics(records)

        assert stats.passed + stats.failed + stats.skipped == stats.total == len(records)
        assert stats.average_duration_millis == pytest.approx(
            stats.total_duration_millis / stats.total
        )

    def test_input_not_mutated(self):
        """Records are left untouched."""
        records = [_record("a", ScenarioStatus.PASSED, 10)]
        snapshot = [record.model_copy() for record in records]

        compute_statistics(records)

        assert records == snapshot
