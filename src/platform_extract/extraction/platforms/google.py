"""
Google search results extractor.

Result blocks on google.com/search change class names constantly, so
results are located by a cascade of layout-specific selectors, each
filtered down to organic results: a heading, a link, some text, and no
ad markers. Results point at external sites, so there is no detail page
and full-content mode does not apply; every item carries its snippet.
"""

import re
from urllib.parse import parse_qs, urlparse

from platform_extract.core.exceptions import ItemExtractionError
from platform_extract.dom.base import PageDocument, PageElement
from platform_extract.extraction.base import PlatformExtractor
from platform_extract.extraction.item_extractor import ItemExtractor, SelectorProfile
from platform_extract.extraction.locator import HeuristicScan
from platform_extract.extraction.models import ExtractedItem, ItemMetadata
from platform_extract.extraction.text import clean_text, truncate
from platform_extract.utils.logging import get_logger

logger = get_logger(__name__)

ORIGIN = "https://www.google.com"

RESULT_SELECTORS = (
    'div[data-header-feature] div[data-content-feature="1"]',
    "div.g:has(h3)",
    'div[class*="g"]:has(h3)',
    "div.yuRUbf",
    ".g",
    "[data-header-feature] > div > div",
)

HEADING_SELECTOR = "h3, h2, h1"
TITLE_SELECTORS = ("h3", "h2", "h1", '[role="heading"]')

LINK_SELECTORS = (
    "h3 a[href]",
    "h2 a[href]",
    "h1 a[href]",
    'a[data-testid="result-title-a"]',
    'a[href*="://"]',
)

SNIPPET_SELECTORS = (
    '[data-content-feature="1"] span',
    ".VwiC3b",
    "[data-sncf]",
    ".s3v9rd",
    ".st",
    'span[data-toggle-trigger="true"]',
    ".aCOpRe",
    "div:not([class]):not([id]) span",
)

AD_CONTAINERS = "[data-text-ad], #tads, #tadsb, #bottomads"
AD_LABEL_ELEMENTS = "span, div"
# A label element reads "Ad", "Sponsored" or "广告", optionally followed by
# a separator and the advertiser's domain
_AD_LABEL = re.compile(r"^(?:Ads?|Sponsored|广告)(?:\s*·|$)")

RESULT_MIN_TEXT_LENGTH = 30
FALLBACK_MIN_TEXT_LENGTH = 50
FALLBACK_MAX_TEXT_LENGTH = 2000
LINK_TITLE_MIN_LENGTH = 10
LINK_TITLE_MAX_LENGTH = 200
SNIPPET_MIN_LENGTH = 20
SNIPPET_MAX_LENGTH = 1000
FALLBACK_SNIPPET_LENGTH = 300

_LEADING_URL = re.compile(r"^https?://\S+\s*")
_DATE_PATTERNS = (
    re.compile(r"\d{4}年\d{1,2}月\d{1,2}日"),
    re.compile(r"\d{1,2}/\d{1,2}/\d{4}"),
    re.compile(r"\d{1,2} [A-Za-z]{3,9},? \d{4}"),
    re.compile(r"[A-Z][a-z]{2,8} \d{1,2}, \d{4}"),
)


def is_ad(element: PageElement) -> bool:
    """Whether a result block is, or sits inside, a sponsored result."""
    if element.closest(AD_CONTAINERS) is not None:
        return True
    if element.select_one(AD_CONTAINERS) is not None:
        return True
    labels = [element, *element.select(AD_LABEL_ELEMENTS)]
    return any(_AD_LABEL.match(clean_text(label.text)) for label in labels)


def unwrap_redirect(url: str) -> str:
    """
    Resolve Google's /url?q=<target> click-tracking links to the target.

    Example:
        >>> unwrap_redirect("https://www.google.com/url?q=https://example.com/&sa=U")
        'https://example.com/'
    """
    parsed = urlparse(url)
    if "google." in (parsed.hostname or "") and parsed.path == "/url":
        params = parse_qs(parsed.query)
        for name in ("q", "url"):
            target = params.get(name, [""])[0]
            if target.startswith(("http://", "https://")):
                return target
    return url


def _is_search_host(url: str) -> bool:
    return "google." in (urlparse(url).hostname or "")


def _is_search_page(url: str) -> bool:
    return _is_search_host(url) and urlparse(url).path.startswith("/search")


class SearchResultItemExtractor(ItemExtractor):
    """
    Reads one organic search result.

    Unlike content cards, a result without a title or a link is useless
    and is dropped.
    """

    def extract_item(
        self,
        element: PageElement,
        index: int,
        fetch_full_content: bool,
        document: PageDocument,
        detail_page: bool = False,
    ) -> ExtractedItem | None:
        try:
            title = self.extract_result_title(element)
            link = self.extract_result_link(element)
            if not title or not link:
                logger.debug(f"Result {index}: missing title or link")
                return None
            content = self.extract_snippet(element, title, link)
            metadata = self.extract_metadata(element, link)
        except Exception as e:
            raise ItemExtractionError(f"Failed to extract result: {e}", index=index) from e

        if len(content) <= self.settings.min_content_length:
            return None

        return ExtractedItem(
            index=index,
            title=title[: self.settings.title_max_length],
            content=content,
            link=link,
            metadata=metadata,
        )

    def extract_result_title(self, element: PageElement) -> str:
        for selector in self.profile.title_selectors:
            heading = self.locator.locate(element, [selector])
            if heading is not None and clean_text(heading.text):
                return clean_text(heading.text)

        for anchor in self.locator.query(element, "a[href]"):
            text = clean_text(anchor.text)
            if (
                LINK_TITLE_MIN_LENGTH < len(text) < LINK_TITLE_MAX_LENGTH
                and "http" not in text
            ):
                return text
        return ""

    def extract_result_link(self, element: PageElement) -> str:
        """Absolute target URL of the result, never a search page."""
        for selector in self.profile.link_selectors:
            anchor = self.locator.locate(element, [selector])
            if anchor is None:
                continue
            url = self._anchor_url(anchor)
            if url and not _is_search_page(url):
                return url

        for anchor in self.locator.query(element, "a[href]"):
            url = self._anchor_url(anchor)
            if url.startswith(("http://", "https://")) and not _is_search_host(url):
                return url
        return ""

    def _anchor_url(self, anchor: PageElement) -> str:
        href = anchor.get_attribute("href") or ""
        return unwrap_redirect(self.make_absolute_url(href, self.profile.origin))

    def extract_snippet(self, element: PageElement, title: str, link: str) -> str:
        """
        The result's description.

        Falls back to the block's own text with the title, the link's
        domain, a leading URL and dates removed.
        """
        for selector in self.profile.content_selectors:
            found = self.locator.locate(element, [selector])
            if found is None:
                continue
            text = clean_text(found.text)
            if SNIPPET_MIN_LENGTH < len(text) < SNIPPET_MAX_LENGTH:
                return truncate(text, self.settings.content_max_length)

        text = clean_text(element.text)
        if title:
            text = text.replace(title, "", 1)
        domain = urlparse(link).netloc
        if domain:
            text = text.replace(domain, "")
        text = _LEADING_URL.sub("", clean_text(text))
        for pattern in _DATE_PATTERNS[:2]:
            text = pattern.sub("", text)
        return clean_text(text)[:FALLBACK_SNIPPET_LENGTH]

    def extract_metadata(self, element: PageElement, link: str = "") -> ItemMetadata | None:
        metadata = ItemMetadata()

        for candidate in self.locator.query(element, "span, div"):
            text = clean_text(candidate.text)
            match = next(
                (m for m in (p.search(text) for p in _DATE_PATTERNS) if m), None
            )
            if match:
                metadata.publish_date = match.group(0)
                break

        host = urlparse(link).hostname
        if host:
            metadata.source = host.removeprefix("www.")

        return None if metadata.is_empty else metadata


class GoogleSearchExtractor(PlatformExtractor):
    """Extracts organic results from google.com/search pages."""

    platform = "google"
    origin = ORIGIN

    def can_handle(self, document: PageDocument) -> bool:
        return _is_search_page(document.url)

    def discover_items(self, document: PageDocument) -> list[PageElement]:
        return self.locator.locate_all(
            document,
            RESULT_SELECTORS,
            accept=self.is_organic_result,
            fallback=HeuristicScan(
                container_selector="div, article, section",
                min_text_length=FALLBACK_MIN_TEXT_LENGTH,
                max_text_length=FALLBACK_MAX_TEXT_LENGTH,
                required_selectors=(HEADING_SELECTOR, 'a[href*="://"]'),
                exclude=is_ad,
            ),
        )

    def is_organic_result(self, element: PageElement) -> bool:
        return (
            element.select_one(HEADING_SELECTOR) is not None
            and element.select_one("a[href]") is not None
            and len(clean_text(element.text)) > RESULT_MIN_TEXT_LENGTH
            and not is_ad(element)
        )

    def profile(self) -> SelectorProfile:
        return SelectorProfile(
            origin=ORIGIN,
            title_selectors=TITLE_SELECTORS,
            link_selectors=LINK_SELECTORS,
            content_selectors=SNIPPET_SELECTORS,
        )

    def create_item_extractor(self) -> ItemExtractor:
        return SearchResultItemExtractor(
            self.profile(), self.extraction_settings, self.locator
        )
