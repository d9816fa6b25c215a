"""
Loading and flattening of Playwright JSON results.

The result document is a tree of suites. Every spec found anywhere in the
tree becomes exactly one ScenarioRecord, in pre-order: a suite's own specs
come before the specs of its child suites.
"""

import json
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from bddreport.core.types import (
    ScenarioRecord,
    ScenarioStatus,
    SpecNode,
    SuiteNode,
    TestRunResult,
)
from bddreport.error_handling.exceptions import InputUnreadableError
from bddreport.monitoring.logger import get_logger

logger = get_logger(__name__)

# Raw statuses from the runner (attempt results and test outcomes).
_STATUS_MAP = {
    "passed": ScenarioStatus.PASSED,
    "expected": ScenarioStatus.PASSED,
    "flaky": ScenarioStatus.PASSED,
    "failed": ScenarioStatus.FAILED,
    "timedout": ScenarioStatus.FAILED,
    "interrupted": ScenarioStatus.FAILED,
    "unexpected": ScenarioStatus.FAILED,
    "skipped": ScenarioStatus.SKIPPED,
}


def normalize_status(raw: Optional[str]) -> ScenarioStatus:
    """Map a runner status onto passed/failed/skipped; unknown values are skipped."""
    if not raw:
        return ScenarioStatus.SKIPPED
    return _STATUS_MAP.get(str(raw).strip().lower(), ScenarioStatus.SKIPPED)


def load_test_run(path: Union[str, Path]) -> TestRunResult:
    """
    Read and validate the results document.

    Args:
        path: Path to the Playwright JSON reporter output

    Returns:
        Parsed result tree

    Raises:
        InputUnreadableError: If the file is missing, not JSON, or has the wrong shape
    """
    path = Path(path)
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputUnreadableError(
            f"Cannot read results file {path}", path=path, cause=e
        ) from e

    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise InputUnreadableError(
            f"Results file {path} is not valid JSON", path=path, cause=e
        ) from e

    if not isinstance(payload, dict):
        raise InputUnreadableError(
            f"Results file {path} must contain a JSON object, got {type(payload).__name__}",
            path=path,
        )

    try:
        result = TestRunResult.model_validate(payload)
    except ValidationError as e:
        raise InputUnreadableError(
            f"Results file {path} does not match the expected suite structure",
            path=path,
            cause=e,
            details={"validation_errors": e.error_count()},
        ) from e

    logger.info(
        f"Loaded results from {path}",
        extra={"stats": result.stats, "spec_count": result.count_specs()},
    )
    return result


def spec_to_record(spec: SpecNode) -> ScenarioRecord:
    """Build the record for one spec using its first attempt."""
    first = spec.attempts[0] if spec.attempts else None

    raw_status = first.status if first and first.status else spec.status
    duration = first.duration if first else 0
    error_message = first.error.message if first and first.error else None

    return ScenarioRecord(
        title=spec.title,
        status=normalize_status(raw_status),
        duration_millis=duration,
        error_message=error_message,
        tags=list(spec.tags),
    )


def flatten_suites(root: SuiteNode) -> List[ScenarioRecord]:
    """
    Flatten a suite tree into one record per spec.

    Args:
        root: Root of the suite tree (a TestRunResult or any SuiteNode)

    Returns:
        Records in pre-order
    """
    records: List[ScenarioRecord] = []
    # Explicit stack: result trees may nest deeper than the recursion limit.
    pending: List[SuiteNode] = [root]
    while pending:
        suite = pending.pop()
        if suite.specs and suite.title:
            logger.debug(f"Processing suite: {suite.title}")

        for spec in suite.specs:
            record = spec_to_record(spec)
            logger.debug(
                f"Scenario: {record.title} - Status: {record.status.value} "
                f"- Duration: {record.duration_millis:g}ms"
            )
            records.append(record)

        pending.extend(reversed(suite.suites))
    return records
