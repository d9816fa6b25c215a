"""
Reporting pipeline exports.
"""

from bddreport.reporting.builder import BuildResult, ReportBuilder, write_report
from bddreport.reporting.cucumber import export_cucumber_json, to_cucumber_features
from bddreport.reporting.renderer import render
from bddreport.reporting.results import flatten_suites, load_test_run, normalize_status
from bddreport.reporting.screenshots import (
    DEFAULT_STEP_MAPPING,
    discover_screenshots,
    load_step_mapping,
    map_screenshots_to_scenarios,
)
from bddreport.reporting.statistics import compute_statistics

__all__ = [
    "ReportBuilder",
    "BuildResult",
    "write_report",
    "load_test_run",
    "flatten_suites",
    "normalize_status",
    "compute_statistics",
    "discover_screenshots",
    "load_step_mapping",
    "map_screenshots_to_scenarios",
    "DEFAULT_STEP_MAPPING",
    "render",
    "export_cucumber_json",
    "to_cucumber_features",
]
