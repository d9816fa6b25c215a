"""
bddreport - build the HTML report for a Playwright BDD run.
Main entry point for the application.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import SettingsError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bddreport import __version__
from bddreport.config.settings import Settings, get_settings
from bddreport.error_handling import ReportError
from bddreport.monitoring.logger import get_logger, setup_logging
from bddreport.reporting.builder import BuildResult, ReportBuilder

console = Console()
logger = get_logger("main")


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description=f"bddreport - BDD HTML report builder v{__version__}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build the report from the configured locations
  python -m bddreport.main

  # Point at a specific results file and screenshots directory
  python -m bddreport.main --results test-results/results.json --screenshots screenshots/

  # Use a custom screenshot-to-step mapping
  python -m bddreport.main --mapping step-mapping.json
        """,
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information",
    )

    # Input options
    parser.add_argument(
        "-r", "--results",
        type=Path,
        help="Playwright JSON results file",
    )
    parser.add_argument(
        "-s", "--screenshots",
        type=Path,
        help="Directory containing step screenshots",
    )
    parser.add_argument(
        "-m", "--mapping",
        type=Path,
        help="JSON file with screenshot-to-step rules",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="HTML report path",
    )
    parser.add_argument(
        "--no-cucumber",
        action="store_true",
        help="Skip the cucumber-style JSON export",
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable structured logging output (JSON)",
    )

    return parser


def show_version() -> int:
    """Show version information."""
    console.print("\n[bold cyan]bddreport - BDD HTML report builder[/bold cyan]")
    console.print(f"Version: [green]{__version__}[/green]")
    return 0


def apply_overrides(settings: Settings, parsed_args: argparse.Namespace) -> Settings:
    """Override settings with command line arguments."""
    if parsed_args.results:
        settings.results_file = parsed_args.results
    if parsed_args.screenshots:
        settings.screenshots_dir = parsed_args.screenshots
    if parsed_args.mapping:
        settings.step_mapping_file = parsed_args.mapping
    if parsed_args.output:
        settings.report_file = parsed_args.output
    if parsed_args.no_cucumber:
        settings.export_cucumber_json = False
    if parsed_args.debug:
        settings.log_level = "DEBUG"
    if parsed_args.verbose:
        settings.log_format = "json"
    return settings


def print_summary(result: BuildResult) -> None:
    """Print the build summary table."""
    stats = result.statistics
    table = Table(title="BDD Report Summary", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Scenarios", str(stats.total))
    table.add_row("Passed", f"[green]{stats.passed}[/green]")
    table.add_row("Failed", f"[red]{stats.failed}[/red]")
    table.add_row("Skipped", f"[yellow]{stats.skipped}[/yellow]")
    table.add_row("Total duration", f"{stats.total_duration_millis / 1000:.1f}s")
    table.add_row("Screenshots", f"{len(result.assets)} ({result.attached_screenshots} attached to steps)")
    table.add_row("Report", str(result.report_path))
    if result.cucumber_path:
        table.add_row("Cucumber JSON", str(result.cucumber_path))
    console.print(table)


def main(args: Optional[list[str]] = None) -> int:
    """
    Main entry point for bddreport.

    Args:
        args: Command line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.version:
        return show_version()

    try:
        settings = apply_overrides(get_settings().model_copy(), parsed_args)
    except (ValidationError, SettingsError) as e:
        console.print(f"[red]✗ Invalid configuration: {escape(str(e))}[/red]")
        return 1

    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
    )

    try:
        result = ReportBuilder(settings).build()
    except ReportError as e:
        logger.error(f"Report generation failed: {e}", extra={"error": e.to_dict()})
        console.print(f"[red]✗ Report generation failed: {escape(str(e))}[/red]")
        return 1
    except Exception as e:
        logger.exception("Unexpected error while building report")
        console.print(f"[red]Fatal error: {escape(str(e))}[/red]")
        return 1

    print_summary(result)
    console.print("[green]✓ BDD HTML report generated successfully[/green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
