"""
Tests for screenshot discovery and step mapping.
"""

import json
from unittest.mock import patch

import pytest

from bddreport.core.types import ScreenshotAsset, StepMapping, StepRule
from bddreport.error_handling.exceptions import InputUnreadableError
from bddreport.reporting.screenshots import (
    DEFAULT_STEP_MAPPING,
    discover_screenshots,
    load_step_mapping,
    map_screenshots_to_scenarios,
    screenshot_link,
)
from conftest import INVALID, VALID


def _asset(tmp_path, name: str) -> ScreenshotAsset:
    return ScreenshotAsset(filename=name, path=tmp_path / name)


class TestDiscoverScreenshots:
    """Tests for discover_screenshots."""

    def test_sorted_images_only(self, tmp_path):
        """Only image files are returned, in filename order."""
        for name in ["03-b.png", "01-a.PNG", "02-c.jpg", "notes.txt", "04-d.jpeg"]:
            (tmp_path / name).write_bytes(b"x")
        (tmp_path / "00-dir.png").mkdir()

        assets = discover_screenshots(tmp_path)

        assert [a.filename for a in assets] == ["01-a.PNG", "02-c.jpg", "03-b.png", "04-d.jpeg"]
        assert assets[0].path == tmp_path / "01-a.PNG"

    def test_custom_extensions(self, tmp_path):
        """Extensions can be restricted."""
        (tmp_path / "a.png").write_bytes(b"x")
        (tmp_path / "b.jpg").write_bytes(b"x")

        assets = discover_screenshots(tmp_path, extensions=[".png"])

        assert [a.filename for a in assets] == ["a.png"]

    def test_missing_directory_returns_empty(self, tmp_path):
        """A missing directory degrades to no screenshots."""
        assert discover_screenshots(tmp_path / "nope") == []

    def test_unreadable_directory_returns_empty(self, tmp_path):
        """Listing failures degrade to no screenshots."""
        with patch("pathlib.Path.iterdir", side_effect=PermissionError("denied")):
            assert discover_screenshots(tmp_path) == []

    def test_step_label(self, tmp_path):
        """Labels drop the extension and turn separators into spaces."""
        asset = _asset(tmp_path, "02-username-entered-invalid_user.png")

        assert asset.step_label == "02 username entered invalid user"

    def test_step_label_collapses_separator_runs(self, tmp_path):
        assert _asset(tmp_path, "03--login__page.jpeg").step_label == "03 login page"


class TestStepMapping:
    """Tests for the rule table model."""

    def test_first_match_wins(self):
        """Rules are scanned in order."""
        mapping = StepMapping(
            rules=[
                StepRule(pattern="login", step="first"),
                StepRule(pattern="login-click", step="second"),
            ]
        )

        assert mapping.find_rule("04-login-click.png").step == "first"
        assert mapping.find_rule("unrelated.png") is None

    def test_undeclared_scope_rejected(self):
        """Scoped rules must point at a declared scope."""
        with pytest.raises(ValueError, match="undeclared scopes"):
            StepMapping(rules=[StepRule(pattern="x", step="y", scope="ghost")])

    def test_scenario_buckets(self):
        """Declared scope titles come first, extras are appended once."""
        buckets = DEFAULT_STEP_MAPPING.scenario_buckets([INVALID, "Logout"])

        assert buckets == [VALID, INVALID, "Logout"]

    def test_default_mapping_covers_login_steps(self):
        """Built-in table holds the twelve login rules."""
        assert len(DEFAULT_STEP_MAPPING.rules) == 12
        assert set(DEFAULT_STEP_MAPPING.scopes) == {"valid", "invalid"}


class TestMapScreenshotsToScenarios:
    """Tests for map_screenshots_to_scenarios."""

    def test_scenario_d_shared_and_scoped(self, tmp_path):
        """Shared steps go everywhere; scoped steps only to their scenario."""
        assets = [
            _asset(tmp_path, "01-page-loaded.png"),
            _asset(tmp_path, "02-username-entered-pwshizz.png"),
        ]

        step_map = map_screenshots_to_scenarios(assets, DEFAULT_STEP_MAPPING)

        valid_steps = [entry.name for entry in step_map[VALID]]
        invalid_steps = [entry.name for entry in step_map[INVALID]]
        assert valid_steps == [
            "Given I navigate to the Sharedo platform",
            'When I enter my username "pwshizz"',
        ]
        assert invalid_steps == ["Given I navigate to the Sharedo platform"]

    def test_shared_steps_reach_extra_scenarios(self, tmp_path):
        """Scenarios outside the declared scopes still receive shared steps."""
        step_map = map_screenshots_to_scenarios(
            [_asset(tmp_path, "01-page-loaded.png")],
            DEFAULT_STEP_MAPPING,
            scenario_titles=["Logout"],
        )

        assert [entry.name for entry in step_map["Logout"]] == [
            "Given I navigate to the Sharedo platform"
        ]

    def test_duplicate_step_names_listed_once(self, tmp_path):
        """Two filename variants of the same step display once, first kept."""
        assets = [
            _asset(tmp_path, "01-page-loaded-desktop.png"),
            _asset(tmp_path, "01-page-loaded-retry.png"),
        ]

        step_map = map_screenshots_to_scenarios(assets, DEFAULT_STEP_MAPPING)

        for title in (VALID, INVALID):
            assert len(step_map[title]) == 1
            assert step_map[title][0].filename == "01-page-loaded-desktop.png"

    def test_unmatched_assets_not_attached(self, tmp_path):
        """Screenshots matching no rule stay out of the scenario buckets."""
        step_map = map_screenshots_to_scenarios(
            [_asset(tmp_path, "99-random.png")], DEFAULT_STEP_MAPPING
        )

        assert step_map == {VALID: [], INVALID: []}

    def test_entries_link_relative_to_report(self, tmp_path):
        """Entries carry the prefixed link and a passed status."""
        step_map = map_screenshots_to_scenarios(
            [_asset(tmp_path, "01-page-loaded.png")],
            DEFAULT_STEP_MAPPING,
            link_prefix="../shots/",
        )

        entry = step_map[VALID][0]
        assert entry.screenshot == "../shots/01-page-loaded.png"
        assert entry.status.value == "passed"

    def test_no_assets(self):
        """Empty input yields empty buckets."""
        assert map_screenshots_to_scenarios([], DEFAULT_STEP_MAPPING) == {VALID: [], INVALID: []}


class TestScreenshotLink:
    """Tests for screenshot_link."""

    def test_quotes_filename(self):
        assert screenshot_link("a b#1.png", "../screenshots") == "../screenshots/a%20b%231.png"

    def test_empty_prefix(self):
        assert screenshot_link("a.png", "") == "a.png"


class TestLoadStepMapping:
    """Tests for load_step_mapping."""

    def test_loads_rules(self, tmp_path):
        """A JSON mapping file validates into a StepMapping."""
        path = tmp_path / "mapping.json"
        path.write_text(
            json.dumps(
                {
                    "rules": [
                        {"pattern": "01-open", "step": "Given I open the app"},
                        {"pattern": "02-logout", "step": "When I log out", "scope": "logout"},
                    ],
                    "scopes": {"logout": ["Logout works"]},
                }
            ),
            encoding="utf-8",
        )

        mapping = load_step_mapping(path)

        assert [rule.pattern for rule in mapping.rules] == ["01-open", "02-logout"]
        assert mapping.scopes == {"logout": ["Logout works"]}

    def test_invalid_mapping_is_fatal(self, tmp_path):
        """Broken mapping files raise InputUnreadableError."""
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps({"rules": [{"pattern": "x", "step": "y", "scope": "z"}]}), encoding="utf-8")

        with pytest.raises(InputUnreadableError, match="step mapping"):
            load_step_mapping(path)

    def test_missing_mapping_is_fatal(self, tmp_path):
        with pytest.raises(InputUnreadableError):
            load_step_mapping(tmp_path / "absent.json")
