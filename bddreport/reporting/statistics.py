"""
Aggregate statistics over flattened scenario records.
"""

from typing import Sequence

from bddreport.core.types import AggregateStatistics, ScenarioRecord, ScenarioStatus


def compute_statistics(records: Sequence[ScenarioRecord]) -> AggregateStatistics:
    """Count outcomes and sum durations; an empty sequence yields all zeros."""
    counts = {status: 0 for status in ScenarioStatus}
    total_duration = 0.0
    for record in records:
        counts[record.status] += 1
        total_duration += record.duration_millis

    total = len(records)
    return AggregateStatistics(
        total=total,
        passed=counts[ScenarioStatus.PASSED],
        failed=counts[ScenarioStatus.FAILED],
        skipped=counts[ScenarioStatus.SKIPPED],
        total_duration_millis=total_duration,
        average_duration_millis=total_duration / total if total > 0 else 0,
    )
