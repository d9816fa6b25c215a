"""
Core module exports.
"""

from bddreport.core.types import (
    AggregateStatistics,
    Attempt,
    AttemptError,
    ScenarioRecord,
    ScenarioStatus,
    ScreenshotAsset,
    SpecNode,
    StepEntry,
    StepMapping,
    StepRule,
    SuiteNode,
    TestRunResult,
)

__all__ = [
    "ScenarioStatus",
    "Attempt",
    "AttemptError",
    "SpecNode",
    "SuiteNode",
    "TestRunResult",
    "ScenarioRecord",
    "ScreenshotAsset",
    "StepEntry",
    "StepRule",
    "StepMapping",
    "AggregateStatistics",
]
