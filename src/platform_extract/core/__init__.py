"""
Core module for the platform extraction engine.

Contains the exception hierarchy used throughout the application.
"""

from platform_extract.core.exceptions import (
    PlatformExtractError,
    ConfigurationError,
    BrowserError,
    NavigationError,
    PageLoadError,
    ExtractionError,
    ItemExtractionError,
    UnsupportedPlatformError,
    FullContentFetchError,
)

__all__ = [
    # Base
    "PlatformExtractError",
    "ConfigurationError",
    # Browser
    "BrowserError",
    "NavigationError",
    "PageLoadError",
    # Extraction
    "ExtractionError",
    "ItemExtractionError",
    "UnsupportedPlatformError",
    "FullContentFetchError",
]
