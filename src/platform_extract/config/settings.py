"""
Pydantic settings models for the platform extraction engine.

Defaults reproduce the limits the target platforms tolerate: a two second
pause between content-site items and at most five items per paced batch.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ExtractionSettings(BaseModel):
    """Field limits and heuristic thresholds shared by all extractors."""

    min_content_length: int = Field(
        default=10,
        ge=0,
        le=1000,
        description="Items whose cleaned content is not longer than this are dropped",
    )
    title_max_length: int = Field(
        default=200,
        ge=10,
        le=2000,
        description="Maximum title length",
    )
    content_max_length: int = Field(
        default=800,
        ge=50,
        le=20000,
        description="Maximum preview content length",
    )
    full_content_max_length: int = Field(
        default=5000,
        ge=100,
        le=200000,
        description="Maximum content length for detail-page (full) content",
    )
    heuristic_min_text_length: int = Field(
        default=50,
        ge=0,
        le=10000,
        description="Minimum container text length for the heuristic item scan",
    )
    min_image_size: int = Field(
        default=50,
        ge=0,
        le=2000,
        description="Images not larger than this in both dimensions are treated as icons",
    )


class PlatformSettings(BaseModel):
    """Per-platform pacing policy and extraction defaults."""

    rate_limited: bool = Field(
        default=False,
        description="Whether extract_async paces items through the rate limiter",
    )
    rate_limit_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        le=120.0,
        description="Minimum delay between two paced item extractions",
    )
    max_items_per_batch: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Hard ceiling on items processed by one paced call",
    )
    default_max_items: int = Field(
        default=5,
        ge=0,
        le=100,
        description="Items requested when the caller does not say",
    )
    default_fetch_full_content: bool = Field(
        default=False,
        description="Whether full content is requested when the caller does not say",
    )
    page_load_wait_ms: int = Field(
        default=5000,
        ge=0,
        le=60000,
        description="Extra wait after navigation before capturing the page",
    )


def _xiaohongshu_defaults() -> PlatformSettings:
    return PlatformSettings(
        rate_limited=True,
        rate_limit_delay_seconds=2.0,
        max_items_per_batch=5,
        default_max_items=5,
        default_fetch_full_content=True,
        page_load_wait_ms=5000,
    )


def _google_defaults() -> PlatformSettings:
    return PlatformSettings(
        rate_limited=False,
        rate_limit_delay_seconds=1.0,
        max_items_per_batch=10,
        default_max_items=5,
        default_fetch_full_content=False,
        page_load_wait_ms=2000,
    )


class BrowserSettings(BaseModel):
    """
    Playwright settings for loading live pages in the CLI.

    Target sites render cards client-side and serve a reduced page to
    unfamiliar clients, so the defaults favour a desktop viewport and a
    Chinese locale.
    """

    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    timeout_ms: int = Field(default=30000, ge=1000, le=120000)
    navigation_timeout_ms: int = Field(default=60000, ge=1000, le=180000)
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default="domcontentloaded",
        description="Load state awaited before the platform's settle wait",
    )
    viewport_width: int = Field(default=1440, ge=320, le=3840)
    viewport_height: int = Field(default=900, ge=240, le=2160)
    locale: str | None = Field(
        default="zh-CN",
        description="Browser locale; None keeps the engine default",
    )
    user_agent: str | None = None


class LoggingSettings(BaseModel):
    """Where package logs go and how verbose they are."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    log_to_console: bool = True
    file_path: Path | None = Field(
        default=None,
        description="Rotating log file; console only when unset",
    )
    max_file_size_mb: int = Field(default=10, ge=1, le=100)
    backup_count: int = Field(default=3, ge=0, le=10)

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept level names in any case (env overrides are often lowercase)."""
        return v.upper() if isinstance(v, str) else v


class Settings(BaseModel):
    """
    Root configuration model.

    Loaded from YAML with environment variable overrides; see loader.py.
    """

    extraction: ExtractionSettings = Field(
        default_factory=ExtractionSettings,
    )
    xiaohongshu: PlatformSettings = Field(
        default_factory=_xiaohongshu_defaults,
        description="Content-site (xiaohongshu.com) policy",
    )
    google: PlatformSettings = Field(
        default_factory=_google_defaults,
        description="Search-engine results (google.com/search) policy",
    )
    browser: BrowserSettings = Field(
        default_factory=BrowserSettings,
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
    )

    model_config = {
        "extra": "forbid",
        "validate_default": True,
    }

    def platform(self, name: str) -> PlatformSettings:
        """
        Get the policy for a platform by name.

        Platforms without a dedicated section get the generic defaults.
        """
        section = getattr(self, name, None)
        if isinstance(section, PlatformSettings):
            return section
        return PlatformSettings()
