"""
Report build pipeline.

read results -> flatten -> compute statistics -> discover and map screenshots
-> render -> write. Nothing is retained between builds.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union

from bddreport.config.settings import Settings
from bddreport.core.types import (
    AggregateStatistics,
    ScenarioRecord,
    ScreenshotAsset,
    StepEntry,
    StepMapping,
)
from bddreport.error_handling.exceptions import OutputWriteError
from bddreport.monitoring.logger import get_logger, log_performance_metric
from bddreport.reporting.cucumber import export_cucumber_json
from bddreport.reporting.renderer import render
from bddreport.reporting.results import flatten_suites, load_test_run
from bddreport.reporting.screenshots import (
    DEFAULT_STEP_MAPPING,
    discover_screenshots,
    load_step_mapping,
    map_screenshots_to_scenarios,
)
from bddreport.reporting.statistics import compute_statistics

logger = get_logger(__name__)


@dataclass
class BuildResult:
    """Everything produced by one report build."""

    records: List[ScenarioRecord]
    statistics: AggregateStatistics
    step_map: Dict[str, List[StepEntry]]
    assets: List[ScreenshotAsset]
    report_path: Path
    generated_at: datetime
    cache_id: Union[int, str]
    cucumber_path: Optional[Path] = None
    attached_screenshots: int = field(init=False)

    def __post_init__(self) -> None:
        self.attached_screenshots = sum(len(entries) for entries in self.step_map.values())


def write_report(
    document: str,
    report_file: Union[str, Path],
    test_results_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Replace the report file with a freshly written document.

    Removes a stale report, creates the report directory and the sibling
    test-results directory, then writes the document as UTF-8.

    Raises:
        OutputWriteError: If any filesystem step fails
    """
    report_file = Path(report_file)
    try:
        if report_file.exists():
            report_file.unlink()
            logger.info(f"Removed old report {report_file}")

        report_file.parent.mkdir(parents=True, exist_ok=True)
        if test_results_dir is not None:
            Path(test_results_dir).mkdir(parents=True, exist_ok=True)

        report_file.write_text(document, encoding="utf-8")
        size_kb = report_file.stat().st_size / 1024
    except OSError as e:
        raise OutputWriteError(
            f"Cannot write report to {report_file}", path=report_file, cause=e
        ) from e

    logger.info(f"Report written to {report_file} ({size_kb:.2f} KB)")
    return report_file


class ReportBuilder:
    """Builds the HTML report for one test run."""

    def __init__(
        self,
        settings: Settings,
        step_mapping: Optional[StepMapping] = None,
    ) -> None:
        """
        Initialize the builder.

        Args:
            settings: Paths and presentation options
            step_mapping: Screenshot rules; defaults to the mapping file from
                settings, or the built-in login mapping
        """
        self.settings = settings
        self.step_mapping = step_mapping

    def resolve_step_mapping(self) -> StepMapping:
        if self.step_mapping is not None:
            return self.step_mapping
        if self.settings.step_mapping_file is not None:
            return load_step_mapping(self.settings.step_mapping_file)
        return DEFAULT_STEP_MAPPING

    def build(
        self,
        generated_at: Optional[datetime] = None,
        cache_id: Optional[Union[int, str]] = None,
    ) -> BuildResult:
        """
        Run the whole pipeline and write the report.

        Args:
            generated_at: Timestamp shown in the report (defaults to now)
            cache_id: Cache-busting identifier (defaults to epoch milliseconds)

        Returns:
            Build artifacts and output paths

        Raises:
            InputUnreadableError: If the results document cannot be used
            OutputWriteError: If a document cannot be written
        """
        started = time.perf_counter()
        settings = self.settings
        generated_at = generated_at or datetime.now()
        cache_id = cache_id if cache_id is not None else int(time.time() * 1000)
        build_logger = get_logger(__name__, cache_id=cache_id)

        test_run = load_test_run(settings.results_file)
        records = flatten_suites(test_run)
        build_logger.info(f"Total scenarios extracted: {len(records)}")

        statistics = compute_statistics(records)
        mapping = self.resolve_step_mapping()
        assets = discover_screenshots(settings.screenshots_dir, settings.image_extensions)
        link_prefix = settings.screenshot_link_prefix()
        step_map = map_screenshots_to_scenarios(
            assets,
            mapping,
            scenario_titles=[record.title for record in records],
            link_prefix=link_prefix,
        )

        metadata = dict(settings.metadata)
        metadata["Executed"] = generated_at.strftime("%Y-%m-%d %H:%M:%S")

        document = render(
            records,
            statistics,
            step_map,
            assets,
            generated_at,
            cache_id,
            link_prefix=link_prefix,
            brand_title=settings.brand_title,
            metadata=metadata,
            chart_script_url=settings.chart_script_url,
        )

        cucumber_path = None
        if settings.export_cucumber_json:
            cucumber_path = export_cucumber_json(
                records,
                settings.cucumber_json_file,
                feature_name=settings.cucumber_feature_name,
                feature_id=settings.cucumber_feature_id,
                feature_description=settings.cucumber_feature_description,
            )

        report_path = write_report(document, settings.report_file, settings.test_results_dir)

        log_performance_metric(
            "report_build_duration",
            (time.perf_counter() - started) * 1000,
            context={"scenarios": len(records), "screenshots": len(assets)},
        )

        return BuildResult(
            records=records,
            statistics=statistics,
            step_map=step_map,
            assets=assets,
            report_path=report_path,
            generated_at=generated_at,
            cache_id=cache_id,
            cucumber_path=cucumber_path,
        )
