"""
Extraction module for the platform extraction engine.

Provides platform-aware item extraction including:
- Extractor registry and platform extractors
- Selector cascades with heuristic fallback
- Single-item field extraction
- Text cleaning and UI noise removal
- Full-content markers and resolution
"""

from platform_extract.extraction.models import (
    ExtractedItem,
    ExtractionResult,
    ItemMetadata,
)
from platform_extract.extraction.text import (
    clean_text,
    normalize,
    remove_ui_noise,
)
from platform_extract.extraction.locator import (
    ElementLocator,
    HeuristicScan,
)
from platform_extract.extraction.item_extractor import (
    ItemExtractor,
    SelectorProfile,
)
from platform_extract.extraction.full_content import (
    FULL_CONTENT_MARKER,
    extract_full_page_content,
    make_full_content_marker,
    parse_full_content_marker,
)
from platform_extract.extraction.base import PlatformExtractor
from platform_extract.extraction.platforms import (
    GoogleSearchExtractor,
    XiaohongshuExtractor,
)
from platform_extract.extraction.registry import ExtractorRegistry
from platform_extract.extraction.resolver import FullContentResolver

__all__ = [
    # Models
    "ExtractedItem",
    "ExtractionResult",
    "ItemMetadata",
    # Text
    "clean_text",
    "normalize",
    "remove_ui_noise",
    # Locating
    "ElementLocator",
    "HeuristicScan",
    # Items
    "ItemExtractor",
    "SelectorProfile",
    # Full content
    "FULL_CONTENT_MARKER",
    "extract_full_page_content",
    "make_full_content_marker",
    "parse_full_content_marker",
    "FullContentResolver",
    # Platforms
    "PlatformExtractor",
    "GoogleSearchExtractor",
    "XiaohongshuExtractor",
    "ExtractorRegistry",
]
