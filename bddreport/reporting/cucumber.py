"""
Cucumber-style JSON export of flattened scenario records.

Cucumber tooling expects features containing scenario elements with steps;
each record becomes one scenario with a single `When` step carrying the
outcome. Cucumber durations are nanoseconds.
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from bddreport.core.types import ScenarioRecord
from bddreport.error_handling.exceptions import OutputWriteError
from bddreport.monitoring.logger import get_logger

logger = get_logger(__name__)

NANOS_PER_MILLI = 1_000_000

DEFAULT_FEATURE_NAME = "Sharedo Platform BDD Tests"
DEFAULT_FEATURE_ID = "sharedo-bdd-tests"
DEFAULT_FEATURE_DESCRIPTION = "BDD Tests for Sharedo Platform"
DEFAULT_FEATURE_URI = "features/sharedo-login.feature"


def slugify(text: str) -> str:
    return re.sub(r"\s+", "-", text.strip().lower())


def to_cucumber_features(
    records: Sequence[ScenarioRecord],
    feature_name: str = DEFAULT_FEATURE_NAME,
    feature_id: str = DEFAULT_FEATURE_ID,
    feature_description: str = DEFAULT_FEATURE_DESCRIPTION,
    feature_uri: str = DEFAULT_FEATURE_URI,
) -> List[Dict[str, Any]]:
    """Build the cucumber feature document for the given records."""
    elements = []
    for record in records:
        elements.append(
            {
                "description": record.title,
                "id": slugify(record.title),
                "keyword": "Scenario",
                "name": record.title,
                "tags": [{"name": tag} for tag in record.tags],
                "type": "scenario",
                "steps": [
                    {
                        "keyword": "When",
                        "name": record.title,
                        "result": {
                            "status": record.status.value,
                            "duration": int(record.duration_millis * NANOS_PER_MILLI),
                            "error_message": record.error_message,
                        },
                    }
                ],
            }
        )

    return [
        {
            "description": feature_description,
            "elements": elements,
            "id": feature_id,
            "keyword": "Feature",
            "name": feature_name,
            "tags": [],
            "type": "feature",
            "uri": feature_uri,
        }
    ]


def export_cucumber_json(
    records: Sequence[ScenarioRecord],
    path: Union[str, Path],
    **feature: str,
) -> Path:
    """
    Write the cucumber-style JSON document.

    Args:
        records: Flattened scenario records
        path: Output file
        **feature: Feature identity overrides passed to to_cucumber_features

    Raises:
        OutputWriteError: If the file cannot be written
    """
    path = Path(path)
    document = to_cucumber_features(records, **feature)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(
            f"Cannot write cucumber results to {path}", path=path, cause=e
        ) from e

    logger.info(f"Wrote cucumber results for {len(records)} scenarios to {path}")
    return path
