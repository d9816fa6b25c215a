"""Configuration management for the BDD report builder."""

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_METADATA: Dict[str, str] = {
    "App Name": "Sharedo Platform",
    "Test Environment": "Release",
    "Browser": "Chromium",
    "Platform": "Windows",
    "Team": "Return of the Mac",
}


class Settings(BaseSettings):
    """Report settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="BDD_REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Configuration
    reports_root: Path = Field(
        default=Path("reports"), description="Root directory shared by all report artifacts"
    )
    results_file: Optional[Path] = Field(
        default=None, description="Playwright JSON results (default: <root>/test-results/results.json)"
    )
    screenshots_dir: Optional[Path] = Field(
        default=None, description="Step screenshots directory (default: <root>/screenshots)"
    )
    report_file: Optional[Path] = Field(
        default=None, description="HTML report path (default: <root>/bdd-reports/bdd-report.html)"
    )
    test_results_dir: Optional[Path] = Field(
        default=None, description="Sibling test-results directory (default: <root>/test-results)"
    )
    cucumber_json_file: Optional[Path] = Field(
        default=None, description="Cucumber-style export (default: <test-results>/cucumber-results.json)"
    )
    export_cucumber_json: bool = Field(
        default=True, description="Write the cucumber-style JSON export"
    )

    # Screenshot Configuration
    step_mapping_file: Optional[Path] = Field(
        default=None, description="JSON file with screenshot-to-step rules"
    )
    # NoDecode: env values reach normalize_extensions as raw text
    image_extensions: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: [".png", ".jpg", ".jpeg"],
        description="File extensions treated as screenshots",
    )
    screenshots_link_prefix: Optional[str] = Field(
        default=None,
        description="Prefix for screenshot links (default: path relative to the report)",
    )

    # Presentation Configuration
    brand_title: str = Field(
        default="Sharedo BDD Test Report", description="Report heading"
    )
    cucumber_feature_name: str = Field(
        default="Sharedo Platform BDD Tests", description="Feature name in the cucumber export"
    )
    cucumber_feature_id: str = Field(
        default="sharedo-bdd-tests", description="Feature id in the cucumber export"
    )
    cucumber_feature_description: str = Field(
        default="BDD Tests for Sharedo Platform",
        description="Feature description in the cucumber export",
    )
    chart_script_url: str = Field(
        default="https://cdn.jsdelivr.net/npm/chart.js",
        description="Chart.js script used by the statistics dashboard",
    )
    metadata: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_METADATA),
        description="Key/value pairs shown in the report header",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: str = Field(
        default="text",
        description="Log format (json or text)",
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path"
    )

    @field_validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ["json", "text"]:
            raise ValueError(f"Invalid log format: {v}")
        return v

    @field_validator("image_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, raw: Any) -> List[str]:
        """Accept lists, JSON arrays or comma-separated strings; lower-case and dot-prefix each entry."""
        if isinstance(raw, str):
            text = raw.strip()
            if text.startswith("["):
                try:
                    raw = json.loads(text)
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid image extension list: {raw}") from e
            else:
                raw = text.split(",")
        normalized: List[str] = []
        for item in raw or []:
            text = str(item).strip().lower()
            if not text:
                continue
            if not text.startswith("."):
                text = f".{text}"
            if text not in normalized:
                normalized.append(text)
        if not normalized:
            raise ValueError("At least one image extension is required")
        return normalized

    @model_validator(mode="after")
    def derive_paths(self) -> "Settings":
        """Fill unset paths from the reports root."""
        root = self.reports_root
        if self.test_results_dir is None:
            self.test_results_dir = root / "test-results"
        if self.results_file is None:
            self.results_file = self.test_results_dir / "results.json"
        if self.screenshots_dir is None:
            self.screenshots_dir = root / "screenshots"
        if self.report_file is None:
            self.report_file = root / "bdd-reports" / "bdd-report.html"
        if self.cucumber_json_file is None:
            self.cucumber_json_file = self.test_results_dir / "cucumber-results.json"
        return self

    def screenshot_link_prefix(self) -> str:
        """Prefix used to link screenshots from the report document."""
        if self.screenshots_link_prefix is not None:
            return self.screenshots_link_prefix.rstrip("/")
        relative = os.path.relpath(self.screenshots_dir, self.report_file.parent)
        return Path(relative).as_posix()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    # Load .env file if it exists
    env_file = Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    return Settings()
