"""
Xiaohongshu (xiaohongshu.com) note extractor.

Search and explore pages list notes as cards; each card links to the
note's detail page under /explore/<id>. The site blocks fast automation,
so this platform is rate limited by default.
"""

import re
from urllib.parse import urlparse

from platform_extract.dom.base import PageDocument, PageElement
from platform_extract.extraction.base import PlatformExtractor
from platform_extract.extraction.item_extractor import SelectorProfile
from platform_extract.extraction.locator import HeuristicScan

ORIGIN = "https://www.xiaohongshu.com"

ITEM_SELECTORS = (
    'section[class*="note-item"]',
    'section[class*="note"]',
    'article[class*="note"]',
    'div[class*="note-item"]',
    'div[class*="feed-item"]',
    'a[class*="note"]',
    ".note-item",
    ".feed-item",
)

LINK_SELECTORS = (
    'a.cover[href*="/search_result/"]',
    'a[href*="/explore/"]',
    "a.title[href]",
    'a[href*="/notes/"]',
    "a[href]",
)

CONTENT_SELECTORS = (
    ".title span",
    "#detail-desc .note-text span",
    ".desc .note-text span",
    ".note-text span",
    "#detail-desc .note-text",
    ".desc .note-text",
    ".note-text",
    "#detail-desc",
    ".desc",
)

DETAIL_LINK_SELECTOR = 'a[href*="/explore/"]'

_DETAIL_PATH = re.compile(r"^/(?:explore|discovery/item)/[^/?#]+")


class XiaohongshuExtractor(PlatformExtractor):
    """Extracts note cards from xiaohongshu.com pages."""

    platform = "xiaohongshu"
    origin = ORIGIN

    def can_handle(self, document: PageDocument) -> bool:
        host = urlparse(document.url).hostname or ""
        return "xiaohongshu.com" in host

    def is_detail_page(self, document: PageDocument) -> bool:
        return bool(_DETAIL_PATH.match(urlparse(document.url).path))

    def discover_items(self, document: PageDocument) -> list[PageElement]:
        return self.locator.locate_all(
            document,
            ITEM_SELECTORS,
            fallback=HeuristicScan(
                min_text_length=self.extraction_settings.heuristic_min_text_length,
                detail_link_selector=DETAIL_LINK_SELECTOR,
            ),
        )

    def profile(self) -> SelectorProfile:
        return SelectorProfile(
            origin=ORIGIN,
            link_selectors=LINK_SELECTORS,
            content_selectors=CONTENT_SELECTORS,
            detail_link_selector=DETAIL_LINK_SELECTOR,
        )
