"""
Core data models and types for the BDD report builder.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class ScenarioStatus(str, Enum):
    """Outcome of a scenario as shown in the report."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class AttemptError(BaseModel):
    """Error captured by the automation framework for a single attempt."""

    message: Optional[str] = None
    stack: Optional[str] = None


class Attempt(BaseModel):
    """One execution of a spec (the first run or a retry)."""

    status: Optional[str] = Field(None, description="Raw status reported by the runner")
    duration: float = Field(0, description="Duration in milliseconds")
    error: Optional[AttemptError] = None

    @field_validator("duration", mode="before")
    @classmethod
    def default_duration(cls, value: Any) -> Any:
        """Missing or null durations count as zero."""
        return 0 if value is None else value


class SpecNode(BaseModel):
    """A single test case within a suite."""

    title: str
    tags: List[str] = Field(default_factory=list)
    attempts: List[Attempt] = Field(default_factory=list)
    status: Optional[str] = Field(None, description="Status reported for the spec itself")

    @model_validator(mode="before")
    @classmethod
    def lift_playwright_tests(cls, data: Any) -> Any:
        """Accept the Playwright reporter shape (spec -> tests -> results).

        Only the first test entry of a spec is considered, matching the one
        test per scenario layout produced by the BDD adapter.
        """
        if not isinstance(data, dict) or "tests" not in data:
            return data

        payload = {key: value for key, value in data.items() if key != "tests"}
        tests = data.get("tests") or []
        if tests and isinstance(tests[0], dict):
            first = tests[0]
            payload.setdefault("attempts", first.get("results") or [])
            if payload.get("status") is None:
                payload["status"] = first.get("status")
        return payload


class SuiteNode(BaseModel):
    """A grouping node that may hold specs and nested suites."""

    title: str = ""
    specs: List[SpecNode] = Field(default_factory=list)
    suites: List["SuiteNode"] = Field(default_factory=list)

    @field_validator("specs", "suites", mode="before")
    @classmethod
    def default_children(cls, value: Any) -> Any:
        return [] if value is None else value


SuiteNode.model_rebuild()


class TestRunResult(SuiteNode):
    """Root of the machine-readable result document."""

    __test__ = False

    stats: Dict[str, Any] = Field(default_factory=dict)

    def count_specs(self) -> int:
        """Count spec nodes at every nesting depth."""
        count = 0
        pending: List[SuiteNode] = [self]
        while pending:
            node = pending.pop()
            count += len(node.specs)
            pending.extend(node.suites)
        return count


class ScenarioRecord(BaseModel):
    """Flattened result for one spec node."""

    title: str
    status: ScenarioStatus = ScenarioStatus.SKIPPED
    duration_millis: float = 0
    error_message: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class ScreenshotAsset(BaseModel):
    """An image file captured during the test run."""

    filename: str
    path: Path

    @property
    def step_label(self) -> str:
        """Human readable label derived from the filename."""
        return re.sub(r"[-_]+", " ", Path(self.filename).stem)


class StepEntry(BaseModel):
    """A step screenshot attached to a scenario panel."""

    name: str
    screenshot: str = Field(..., description="Link to the screenshot, relative to the report")
    filename: str
    status: ScenarioStatus = ScenarioStatus.PASSED


class StepRule(BaseModel):
    """Associates screenshots whose filename contains `pattern` with a step."""

    pattern: str = Field(..., min_length=1)
    step: str
    scope: Optional[str] = Field(None, description="Scope tag, or None for a shared step")


class StepMapping(BaseModel):
    """Ordered screenshot-to-step rules plus the scenario titles behind each scope tag."""

    rules: List[StepRule] = Field(default_factory=list)
    scopes: Dict[str, List[str]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_scopes(self) -> "StepMapping":
        """Every scoped rule must reference a declared scope."""
        unknown = sorted(
            {rule.scope for rule in self.rules if rule.scope and rule.scope not in self.scopes}
        )
        if unknown:
            raise ValueError(f"Step rules reference undeclared scopes: {unknown}")
        return self

    def find_rule(self, filename: str) -> Optional[StepRule]:
        """Return the first rule whose pattern occurs in the filename."""
        for rule in self.rules:
            if rule.pattern in filename:
                return rule
        return None

    def scenario_buckets(self, extra_titles: Iterable[str] = ()) -> List[str]:
        """All known scenario titles, declared scopes first, without duplicates."""
        buckets: List[str] = []
        for titles in self.scopes.values():
            for title in titles:
                if title not in buckets:
                    buckets.append(title)
        for title in extra_titles:
            if title not in buckets:
                buckets.append(title)
        return buckets


class AggregateStatistics(BaseModel):
    """Counts and durations over all scenario records."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    total_duration_millis: float = 0
    average_duration_millis: float = 0

    @property
    def success_rate(self) -> float:
        """Percentage of passed scenarios."""
        if self.total == 0:
            return 0.0
        return self.passed / self.total * 100
