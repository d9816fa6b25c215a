"""
Screenshot discovery and screenshot-to-step association.

Screenshots are matched to BDD steps by filename substring using an ordered
rule table. The first matching rule wins. A rule without a scope tag marks a
shared step and attaches the screenshot to every known scenario.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union
from urllib.parse import quote

from pydantic import ValidationError

from bddreport.core.types import ScreenshotAsset, StepEntry, StepMapping, StepRule
from bddreport.error_handling.exceptions import AssetsUnavailableError, InputUnreadableError
from bddreport.monitoring.logger import get_logger

logger = get_logger(__name__)

DEFAULT_IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")

VALID_LOGIN_SCENARIO = "Successful login with valid credentials"
INVALID_LOGIN_SCENARIO = "Login with invalid credentials"

DEFAULT_STEP_MAPPING = StepMapping(
    rules=[
        StepRule(pattern="01-page-loaded", step="Given I navigate to the Sharedo platform"),
        StepRule(
            pattern="02-username-entered-pwshizz",
            step='When I enter my username "pwshizz"',
            scope="valid",
        ),
        StepRule(
            pattern="02-username-entered-invalid_user",
            step='When I enter my username "invalid_user"',
            scope="invalid",
        ),
        StepRule(pattern="03-password-entered", step="And I enter my password", scope="valid"),
        StepRule(
            pattern="03-invalid-password-entered",
            step="And I enter an invalid password",
            scope="invalid",
        ),
        StepRule(pattern="04-before-login-click", step="And I click the login button"),
        StepRule(pattern="05-after-login-attempt", step="And I click the login button (result)"),
        StepRule(
            pattern="06-login-success-verified",
            step="Then I should be successfully logged in",
            scope="valid",
        ),
        StepRule(
            pattern="06-checking-for-error",
            step="Then I should see an error message",
            scope="invalid",
        ),
        StepRule(
            pattern="07-not-on-login-page",
            step="And I should not see the login page",
            scope="valid",
        ),
        StepRule(
            pattern="07-error-message-found",
            step="Then I should see an error message (verified)",
            scope="invalid",
        ),
        StepRule(
            pattern="08-still-on-login-page",
            step="And I should remain on the login page",
            scope="invalid",
        ),
    ],
    scopes={
        "valid": [VALID_LOGIN_SCENARIO],
        "invalid": [INVALID_LOGIN_SCENARIO],
    },
)


def _list_images(directory: Path, extensions: Sequence[str]) -> List[ScreenshotAsset]:
    if not directory.is_dir():
        raise AssetsUnavailableError(
            "Screenshots directory not found", directory=directory
        )

    try:
        entries = [entry for entry in directory.iterdir() if entry.is_file()]
    except OSError as e:
        raise AssetsUnavailableError(
            "Cannot list screenshots directory", directory=directory, cause=e
        ) from e

    wanted = tuple(ext.lower() for ext in extensions)
    images = [entry for entry in entries if entry.suffix.lower() in wanted]
    return [
        ScreenshotAsset(filename=entry.name, path=entry)
        for entry in sorted(images, key=lambda entry: entry.name)
    ]


def discover_screenshots(
    directory: Union[str, Path],
    extensions: Sequence[str] = DEFAULT_IMAGE_EXTENSIONS,
) -> List[ScreenshotAsset]:
    """
    List image files in a directory, sorted by filename.

    A missing or unreadable directory yields an empty list; the report is then
    built without screenshots.

    Args:
        directory: Screenshots directory
        extensions: File extensions treated as images

    Returns:
        Screenshot assets in lexicographic filename order
    """
    try:
        assets = _list_images(Path(directory), extensions)
    except AssetsUnavailableError as e:
        logger.warning(f"{e}; continuing without screenshots", extra={"error": e.to_dict()})
        return []

    logger.info(f"Found {len(assets)} screenshots in {directory}")
    return assets


def load_step_mapping(path: Union[str, Path]) -> StepMapping:
    """
    Load a step mapping from a JSON file.

    The file holds an object with `rules` (list of pattern/step/scope objects)
    and `scopes` (scope tag to list of scenario titles).

    Raises:
        InputUnreadableError: If the file cannot be read or validated
    """
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        mapping = StepMapping.model_validate(payload)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise InputUnreadableError(
            f"Cannot load step mapping from {path}", path=path, cause=e
        ) from e

    logger.info(f"Loaded {len(mapping.rules)} step rules from {path}")
    return mapping


def screenshot_link(filename: str, link_prefix: str) -> str:
    """Relative link from the report to a screenshot file."""
    quoted = quote(filename)
    if not link_prefix:
        return quoted
    return f"{link_prefix.rstrip('/')}/{quoted}"


def map_screenshots_to_scenarios(
    assets: Iterable[ScreenshotAsset],
    mapping: StepMapping,
    scenario_titles: Iterable[str] = (),
    link_prefix: str = "../screenshots",
) -> Dict[str, List[StepEntry]]:
    """
    Attach each screenshot to the scenario step it illustrates.

    Args:
        assets: Screenshots in display order
        mapping: Ordered rule table
        scenario_titles: Additional scenario titles that receive shared steps
        link_prefix: Prefix for the screenshot links stored on each entry

    Returns:
        Scenario title to its step entries, one entry per step name
    """
    buckets = mapping.scenario_buckets(scenario_titles)
    step_map: Dict[str, List[StepEntry]] = {title: [] for title in buckets}

    for asset in assets:
        rule: Optional[StepRule] = mapping.find_rule(asset.filename)
        if rule is None:
            logger.debug(f"No step rule matches {asset.filename}; gallery only")
            continue

        targets = mapping.scopes[rule.scope] if rule.scope else buckets
        for title in targets:
            step_map.setdefault(title, []).append(
                StepEntry(
                    name=rule.step,
                    screenshot=screenshot_link(asset.filename, link_prefix),
                    filename=asset.filename,
                )
            )

    for title, entries in step_map.items():
        seen = set()
        unique: List[StepEntry] = []
        for entry in entries:
            if entry.name in seen:
                continue
            seen.add(entry.name)
            unique.append(entry)
        step_map[title] = unique

    return step_map
