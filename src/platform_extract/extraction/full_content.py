"""
Full-content mode helpers.

A list item cannot yield its full body: that lives on the item's detail
page. Instead of navigating, the extractor emits a marker carrying the
detail URL; a collaborator (see extraction.resolver) loads the page and
runs extract_full_page_content() on it. When the current page already is
a detail page, the extractor calls extract_full_page_content() directly.
"""

from platform_extract.dom.base import PageDocument, PageElement
from platform_extract.extraction.text import clean_text, remove_ui_noise
from platform_extract.utils.logging import get_logger

logger = get_logger(__name__)

FULL_CONTENT_MARKER = "[FETCH_FULL_CONTENT]"
NO_CONTENT_PLACEHOLDER = "[No content found on this page]"

# Subtrees whose text is never page content
NON_CONTENT_TAGS = frozenset({"script", "style", "noscript", "template"})

MIN_TEXT_NODE_LENGTH = 3


def make_full_content_marker(url: str) -> str:
    return f"{FULL_CONTENT_MARKER}{url}"


def parse_full_content_marker(content: str) -> str | None:
    """Return the URL carried by a marker, or None for ordinary content."""
    if content.startswith(FULL_CONTENT_MARKER):
        return content[len(FULL_CONTENT_MARKER):]
    return None


def _is_non_content(element: PageElement) -> bool:
    return element.tag_name in NON_CONTENT_TAGS or element.is_hidden


def walk_visible_text(element: PageElement) -> str:
    """
    Join the substantive visible text nodes under ``element``.

    Skips script/style/hidden subtrees and nodes of three characters or
    fewer.
    """
    texts = []
    for text, _parent in element.text_nodes(prune=_is_non_content):
        text = text.strip()
        if len(text) > MIN_TEXT_NODE_LENGTH:
            texts.append(text)
    return " ".join(texts).strip()


def extract_full_page_content(
    document: PageDocument,
    selectors: tuple[str, ...] | list[str],
    max_length: int,
) -> str:
    """
    Extract the body of a detail page.

    Every selector is tried and the longest walked text wins; when none
    matches, the whole page is walked.

    Returns:
        Cleaned content, or NO_CONTENT_PLACEHOLDER when the page is empty.
    """
    best = ""
    for selector in selectors:
        element = document.select_one(selector)
        if element is None:
            continue
        text = walk_visible_text(element)
        if len(text) > len(best):
            logger.debug(f"Longer full content via {selector!r}: {len(text)} chars")
            best = text

    if not best:
        best = walk_visible_text(document.root)

    content = remove_ui_noise(clean_text(best))[:max_length]
    return content or NO_CONTENT_PLACEHOLDER
