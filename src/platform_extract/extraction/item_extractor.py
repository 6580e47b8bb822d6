"""
Single-item extraction: title, link, image, content and metadata.

An item element is one post card or result block. Every field is found
by an ordered selector cascade (SelectorProfile) followed by
structure-agnostic heuristics, because the markup inside a card is
mostly non-semantic and changes often.

Content has two modes. Preview mode reads the card itself in three
stages: platform content selectors, a scored scan over likely text
containers, and finally an aggressive walk over every text node. Full
mode reads the detail page when the card belongs to the current page,
and otherwise emits a marker carrying the detail URL for a collaborator
to fetch.
"""

import re
from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit

from platform_extract.config.settings import ExtractionSettings
from platform_extract.core.exceptions import ItemExtractionError
from platform_extract.dom.base import PageDocument, PageElement
from platform_extract.extraction.full_content import (
    extract_full_page_content,
    make_full_content_marker,
)
from platform_extract.extraction.locator import ElementLocator
from platform_extract.extraction.models import ExtractedItem, ItemMetadata
from platform_extract.extraction.text import (
    clean_text,
    count_word_tokens,
    is_noise_token,
    normalize,
)
from platform_extract.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TITLE_SELECTORS = (
    "h1", "h2", "h3", "h4",
    '[class*="title"]',
    '[class*="header"]',
    '[class*="name"]',
    "a[title]",
    ".note-title",
    ".feed-title",
    '[class*="text"]',
)

DEFAULT_IMAGE_SELECTORS = (
    "img[src]",
    ".cover img[src]",
    '[class*="image"] img[src]',
    '[class*="pic"] img[src]',
    '[class*="photo"] img[src]',
    "picture img[src]",
    ".note-image img[src]",
)

DEFAULT_FULL_CONTENT_SELECTORS = (
    "#detail-desc .note-text",
    ".note-text",
    ".content",
    '[class*="content"]',
    ".desc",
    "main",
    "article",
)

# Likely text containers for the search-result content heuristic
CANDIDATE_CONTENT_SELECTORS = (
    '[class*="content"]',
    '[class*="text"]',
    '[class*="desc"]',
    '[class*="summary"]',
    '[class*="note"]',
    '[class*="feed"]',
    '[class*="card"]',
    '[class*="item"]',
    "p",
    "div",
    "span",
)

DEFAULT_AUTHOR_SELECTORS = ('[class*="author"]', '[class*="user"]', '[class*="name"]')
DEFAULT_COUNTER_SELECTOR = '[class*="count"], [class*="num"]'
DEFAULT_TAG_SELECTORS = ("a.tag", '[class*="tag"] a')

UI_IMAGE_MARKERS = ("avatar", "icon", "logo")

_BACKGROUND_URL = re.compile(r"""url\(\s*(['"]?)(.*?)\1\s*\)""", re.IGNORECASE)
_MAGNITUDE_COUNT = re.compile(r"\d\s*(?:万|千|[kKwWmM]\b)")
_DIGIT = re.compile(r"\d")

TITLE_MIN_LENGTH = 5
PREVIEW_ACCEPT_LENGTH = 20
PREVIEW_HEURISTIC_BELOW = 50
CANDIDATE_MIN_LENGTH = 30
CANDIDATE_MAX_LENGTH = 1000
CANDIDATE_MIN_WORDS = 3
SPAN_PREFERRED_LENGTH = 50
CONTENT_NODE_MIN_LENGTH = 5
AGGRESSIVE_NODE_MIN_LENGTH = 10


@dataclass(frozen=True)
class SelectorProfile:
    """Ordered selector cascades for one platform's item cards."""

    origin: str
    title_selectors: tuple[str, ...] = DEFAULT_TITLE_SELECTORS
    link_selectors: tuple[str, ...] = ("a[href]",)
    image_selectors: tuple[str, ...] = DEFAULT_IMAGE_SELECTORS
    content_selectors: tuple[str, ...] = ()
    full_content_selectors: tuple[str, ...] = DEFAULT_FULL_CONTENT_SELECTORS
    author_selectors: tuple[str, ...] = DEFAULT_AUTHOR_SELECTORS
    counter_selector: str = DEFAULT_COUNTER_SELECTOR
    tag_selectors: tuple[str, ...] = DEFAULT_TAG_SELECTORS
    # Links to other items' detail pages, e.g. related-note cards
    detail_link_selector: str | None = None


def dedupe_overlapping(texts: list[str]) -> list[str]:
    """
    Drop texts contained in a longer text, and exact repeats.

    Nested containers repeat their children's text; only the outermost
    (longest) version of an overlapping group survives.

    Example:
        >>> dedupe_overlapping(["pasta recipe", "easy pasta recipe for two"])
        ['easy pasta recipe for two']
    """
    unique: list[str] = []
    for text in texts:
        if text in unique:
            continue
        if any(len(other) > len(text) and text in other for other in texts):
            continue
        unique.append(text)
    return unique


def _same_page(url: str, other: str) -> bool:
    """Compare two URLs ignoring query, fragment and a trailing slash."""
    a, b = urlsplit(url), urlsplit(other)
    return (a.netloc.lower(), a.path.rstrip("/")) == (b.netloc.lower(), b.path.rstrip("/"))


def _is_tag_link(element: PageElement) -> bool:
    classes = (element.get_attribute("class") or "").split()
    return element.tag_name == "a" and "tag" in classes


class ItemExtractor:
    """
    Extracts one ExtractedItem from an item element.

    Example:
        >>> extractor = ItemExtractor(SelectorProfile(origin="https://www.xiaohongshu.com"))
        >>> item = extractor.extract_item(card, 1, False, document)
    """

    def __init__(
        self,
        profile: SelectorProfile,
        settings: ExtractionSettings | None = None,
        locator: ElementLocator | None = None,
    ) -> None:
        self.profile = profile
        self.settings = settings or ExtractionSettings()
        self.locator = locator or ElementLocator()

    def extract_item(
        self,
        element: PageElement,
        index: int,
        fetch_full_content: bool,
        document: PageDocument,
        detail_page: bool = False,
    ) -> ExtractedItem | None:
        """
        Extract one item.

        Args:
            element: The item card
            index: 1-based discovery position
            fetch_full_content: Request full instead of preview content
            document: Page the card belongs to
            detail_page: Whether the page is a detail page; cards on it that
                link to other detail pages still get a marker

        Returns:
            The item, or None when its content is too short to be real.

        Raises:
            ItemExtractionError: If the element could not be read
        """
        try:
            title = self.extract_title(element, index)
            link = self.make_absolute_url(self.extract_link(element), document.url)
            image = self.make_absolute_url(self.extract_image(element), document.url)
            content = self.extract_content(
                element, document, fetch_full_content, detail_page, title=title, link=link
            )
            metadata = self.extract_metadata(element, link)
        except Exception as e:
            raise ItemExtractionError(f"Failed to extract item: {e}", index=index) from e

        logger.debug(
            f"Item {index}: title={title[:50]!r} link={link!r} "
            f"image={image!r} content_length={len(content)}"
        )

        if len(content) <= self.settings.min_content_length:
            return None

        return ExtractedItem(
            index=index,
            title=title[: self.settings.title_max_length],
            content=content,
            link=link,
            image=image,
            metadata=metadata,
        )

    # -- URLs ---------------------------------------------------------------

    def make_absolute_url(self, url: str, base_url: str) -> str:
        """
        Resolve a URL found in the page.

        Scheme-relative URLs get https, root-relative URLs get the platform
        origin, anything else is resolved against the page URL.
        """
        url = (url or "").strip()
        if not url or url.lower().startswith("javascript:"):
            return ""
        if url.startswith(("http://", "https://")):
            return url
        if url.startswith("//"):
            return "https:" + url
        if url.startswith("/"):
            return self.profile.origin.rstrip("/") + url
        return urljoin(base_url, url)

    # -- Title --------------------------------------------------------------

    def extract_title(self, element: PageElement, index: int) -> str:
        for selector in self.profile.title_selectors:
            candidate = self.locator.locate(element, [selector])
            if candidate is None:
                continue
            text = clean_text(candidate.text) or clean_text(
                candidate.get_attribute("title") or ""
            )
            if TITLE_MIN_LENGTH <= len(text) < self.settings.title_max_length:
                return text
        return f"Item {index}"

    # -- Link ---------------------------------------------------------------

    def extract_link(self, element: PageElement) -> str:
        """Raw href of the first detail/permalink match, else any href."""
        found = self.locator.locate(
            element,
            self.profile.link_selectors,
            accept=lambda e: bool((e.get_attribute("href") or "").strip()),
        )
        if found is None:
            found = self.locator.locate(
                element,
                ["[href]"],
                accept=lambda e: bool((e.get_attribute("href") or "").strip()),
            )
        if found is None and (element.get_attribute("href") or "").strip():
            # The card itself may be the anchor
            found = element
        return (found.get_attribute("href") or "").strip() if found else ""

    # -- Image --------------------------------------------------------------

    def extract_image(self, element: PageElement) -> str:
        seen: set[PageElement] = set()
        for selector in self.profile.image_selectors:
            for img in self.locator.query(element, selector):
                if img in seen:
                    continue
                seen.add(img)
                src = (img.get_attribute("src") or "").strip()
                if src and self._is_content_image(img, src):
                    return src

        for styled in self.locator.query(element, '[style*="background"]'):
            match = _BACKGROUND_URL.search(styled.get_attribute("style") or "")
            if match and match.group(2):
                return match.group(2)

        return ""

    def _is_content_image(self, img: PageElement, src: str) -> bool:
        size = img.size
        if size is not None:
            width, height = size
            minimum = self.settings.min_image_size
            return width > minimum and height > minimum
        lowered = src.lower()
        return not any(marker in lowered for marker in UI_IMAGE_MARKERS)

    # -- Content ------------------------------------------------------------

    def extract_content(
        self,
        element: PageElement,
        document: PageDocument,
        fetch_full_content: bool,
        detail_page: bool,
        title: str = "",
        link: str = "",
    ) -> str:
        if fetch_full_content:
            elsewhere = self.other_detail_link(element, document) if detail_page else None
            if detail_page and elsewhere is None:
                return extract_full_page_content(
                    document,
                    self.profile.full_content_selectors,
                    self.settings.full_content_max_length,
                )
            link = link or elsewhere or ""
            if link:
                return make_full_content_marker(link)
            logger.debug("Full content requested but item has no link, using preview")
        return self.extract_preview_content(element, title=title, link=link)

    def other_detail_link(self, element: PageElement, document: PageDocument) -> str | None:
        """
        Absolute URL of another item's detail page linked from this card.

        On a detail page, cards such as related notes point elsewhere and
        must not receive the page's own body. None when the card links
        only to the current page, or when the platform names no detail
        link selector.
        """
        if not self.profile.detail_link_selector:
            return None
        for anchor in self.locator.query(element, self.profile.detail_link_selector):
            url = self.make_absolute_url(anchor.get_attribute("href") or "", document.url)
            if url and not _same_page(url, document.url):
                return url
        return None

    def extract_preview_content(
        self,
        element: PageElement,
        title: str = "",
        link: str = "",
    ) -> str:
        content = ""

        for selector in self.profile.content_selectors:
            found = self.locator.locate(element, [selector])
            if found is None:
                continue
            content = self._text_from_content_element(found, selector)
            if len(content) > PREVIEW_ACCEPT_LENGTH:
                break

        if len(content) < PREVIEW_HEURISTIC_BELOW:
            candidate = self.best_candidate_text(element)
            if len(candidate) > len(content):
                content = candidate

        if len(content) < PREVIEW_ACCEPT_LENGTH:
            aggressive = self.aggressive_text(element)
            if len(aggressive) > len(content):
                content = aggressive

        if not content:
            return ""
        return normalize(content, self.settings.content_max_length)

    def _text_from_content_element(self, found: PageElement, selector: str) -> str:
        if "span" in selector:
            parent = found.parent
            siblings = parent.select("span") if parent is not None else []
            for span in siblings:
                text = clean_text(span.text)
                if len(text) > SPAN_PREFERRED_LENGTH and span.select_one("a") is None:
                    return text
            return clean_text(found.text)

        texts = []
        for text, _parent in found.text_nodes(prune=_is_tag_link):
            text = text.strip()
            if len(text) > CONTENT_NODE_MIN_LENGTH:
                texts.append(text)
        return " ".join(texts)

    def best_candidate_text(self, element: PageElement) -> str:
        """
        Longest plausible text block inside the card.

        Candidates must be 30-1000 characters with more than three
        word-like tokens; overlapping candidates keep only the longest.
        """
        candidates = []
        for selector in CANDIDATE_CONTENT_SELECTORS:
            for found in self.locator.query(element, selector):
                text = clean_text(found.text)
                if not CANDIDATE_MIN_LENGTH < len(text) < CANDIDATE_MAX_LENGTH:
                    continue
                if count_word_tokens(text) > CANDIDATE_MIN_WORDS:
                    candidates.append(text)

        unique = dedupe_overlapping(candidates)
        logger.debug(f"Content heuristic kept {len(unique)} of {len(candidates)} candidates")
        return max(unique, key=len, default="")

    def aggressive_text(self, element: PageElement) -> str:
        """Every substantive text node that is not a counter or UI label."""
        texts = []
        for text, _parent in element.text_nodes():
            text = text.strip()
            if len(text) <= AGGRESSIVE_NODE_MIN_LENGTH or is_noise_token(text):
                continue
            texts.append(text)
        return " ".join(texts)

    # -- Metadata -----------------------------------------------------------

    def extract_metadata(self, element: PageElement, link: str = "") -> ItemMetadata | None:
        metadata = ItemMetadata()

        for selector in self.profile.author_selectors:
            found = self.locator.locate(element, [selector])
            if found is not None and clean_text(found.text):
                metadata.author = clean_text(found.text)
                break

        for counter in self.locator.query(element, self.profile.counter_selector):
            text = clean_text(counter.text)
            if not _DIGIT.search(text) or not _MAGNITUDE_COUNT.search(text):
                continue
            classes = (counter.get_attribute("class") or "").lower()
            if "like" in classes:
                metadata.like_count = metadata.like_count or text
            else:
                metadata.view_count = metadata.view_count or text

        for selector in self.profile.tag_selectors:
            for tag in self.locator.query(element, selector):
                name = clean_text(tag.text).lstrip("#").strip()
                if name and name not in metadata.tags:
                    metadata.tags.append(name)

        return None if metadata.is_empty else metadata
