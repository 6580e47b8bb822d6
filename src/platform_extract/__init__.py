"""
platform-extract - Platform-aware content extraction engine.

Extracts structured posts and search results (title, content, link,
image, metadata) from xiaohongshu.com and Google search pages, pacing
item extraction under a per-platform rate limit.
"""

__version__ = "0.1.0"

from platform_extract.config import Settings, load_config
from platform_extract.utils.logging import setup_logging, get_logger
from platform_extract.core.exceptions import PlatformExtractError
from platform_extract.extraction import (
    ExtractedItem,
    ExtractionResult,
    ExtractorRegistry,
    PlatformExtractor,
)
from platform_extract.pacing import RateLimiter
from platform_extract.service import ExtractionService

__all__ = [
    "Settings",
    "load_config",
    "setup_logging",
    "get_logger",
    "PlatformExtractError",
    "ExtractedItem",
    "ExtractionResult",
    "ExtractorRegistry",
    "PlatformExtractor",
    "RateLimiter",
    "ExtractionService",
]
