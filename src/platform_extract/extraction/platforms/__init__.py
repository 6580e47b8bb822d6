"""
Platform extractors.

Each module holds one PlatformExtractor subclass with its selector
cascades.
"""

from platform_extract.extraction.platforms.xiaohongshu import XiaohongshuExtractor
from platform_extract.extraction.platforms.google import (
    GoogleSearchExtractor,
    SearchResultItemExtractor,
)

__all__ = [
    "XiaohongshuExtractor",
    "GoogleSearchExtractor",
    "SearchResultItemExtractor",
]
