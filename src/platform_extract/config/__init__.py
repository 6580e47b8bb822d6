"""
Configuration module for the platform extraction engine.

Provides Pydantic-based settings with YAML file support and environment
variable overrides.
"""

from platform_extract.config.settings import (
    Settings,
    ExtractionSettings,
    PlatformSettings,
    BrowserSettings,
    LoggingSettings,
)
from platform_extract.config.loader import (
    load_config,
    get_settings,
    reset_settings,
    get_default_config_path,
)

__all__ = [
    "Settings",
    "ExtractionSettings",
    "PlatformSettings",
    "BrowserSettings",
    "LoggingSettings",
    "load_config",
    "get_settings",
    "reset_settings",
    "get_default_config_path",
]
