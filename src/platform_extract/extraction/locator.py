"""
Selector cascades with a structural heuristic fallback.

Target sites rename their class names without notice, so each lookup is
an ordered list of selectors running from "known precise target" to
"generic fallback". The first selector that yields at least one accepted
match decides the result; later selectors are never consulted, even if
they would match better.

When the whole cascade comes up empty, a heuristic scan over generic
container elements keeps the ones that look like real content: enough
text, or a link to a detail page.
"""

from dataclasses import dataclass
from typing import Callable, Sequence, Union

from platform_extract.dom.base import PageDocument, PageElement
from platform_extract.extraction.text import clean_text
from platform_extract.utils.logging import get_logger

logger = get_logger(__name__)

Scope = Union[PageDocument, PageElement]
ElementFilter = Callable[[PageElement], bool]

GENERIC_CONTAINERS = 'article, section, [class*="card"], [class*="item"]'


@dataclass(frozen=True)
class HeuristicScan:
    """
    Fallback scan configuration.

    A container is kept when its cleaned text is longer than
    ``min_text_length`` (and shorter than ``max_text_length`` if set) or
    when it contains a ``detail_link_selector`` match. Kept containers must
    also match every ``required_selectors`` entry and not be rejected by
    ``exclude``.
    """

    container_selector: str = GENERIC_CONTAINERS
    min_text_length: int = 50
    max_text_length: int | None = None
    detail_link_selector: str | None = None
    required_selectors: tuple[str, ...] = ()
    exclude: ElementFilter | None = None


class ElementLocator:
    """
    Runs selector cascades against a document or element scope.

    Query failures (including malformed selectors) count as "no match".

    Example:
        >>> locator = ElementLocator()
        >>> cards = locator.locate_all(document, ['section.note-item', '.feed-item'],
        ...                            fallback=HeuristicScan())
    """

    def query(self, scope: Scope, selector: str) -> list[PageElement]:
        try:
            return scope.select(selector)
        except Exception as e:
            logger.debug(f"Selector {selector!r} failed: {e}")
            return []

    def locate(
        self,
        scope: Scope,
        selectors: Sequence[str],
        accept: ElementFilter | None = None,
    ) -> PageElement | None:
        """
        First element matched by the first productive selector.

        With ``accept``, the first accepted element of the first selector
        that has any accepted element.
        """
        for selector in selectors:
            for element in self.query(scope, selector):
                if accept is None or accept(element):
                    return element
        return None

    def locate_all(
        self,
        scope: Scope,
        selectors: Sequence[str],
        accept: ElementFilter | None = None,
        fallback: HeuristicScan | None = None,
    ) -> list[PageElement]:
        """
        All matches of the first selector yielding at least one element.

        Args:
            scope: Document or element to search
            selectors: Cascade in priority order
            accept: Optional filter applied to each selector's matches
                before deciding whether that selector produced anything
            fallback: Heuristic scan used when the cascade is empty

        Returns:
            Matching elements in document order, possibly empty
        """
        for selector in selectors:
            matches = self.query(scope, selector)
            if accept is not None:
                matches = [element for element in matches if accept(element)]
            logger.debug(f"Selector {selector!r}: {len(matches)} match(es)")
            if matches:
                return matches

        if fallback is None:
            return []

        found = self.heuristic_scan(scope, fallback)
        logger.debug(f"Heuristic scan found {len(found)} container(s)")
        return found

    def heuristic_scan(self, scope: Scope, scan: HeuristicScan) -> list[PageElement]:
        """
        Filter generic containers by text length or detail-link presence.

        A kept container nested in another kept container is the same
        item seen twice; only the outermost one is returned.
        """
        kept = []
        for element in self.query(scope, scan.container_selector):
            if not self._looks_like_content(element, scan):
                continue
            if any(
                not self.query(element, required)
                for required in scan.required_selectors
            ):
                continue
            if scan.exclude is not None and scan.exclude(element):
                continue
            kept.append(element)

        outer = set(kept)
        return [element for element in kept if not _has_ancestor_in(element, outer)]

    def _looks_like_content(self, element: PageElement, scan: HeuristicScan) -> bool:
        length = len(clean_text(element.text))
        if length > scan.min_text_length and (
            scan.max_text_length is None or length < scan.max_text_length
        ):
            return True
        if scan.detail_link_selector is not None:
            return bool(self.query(element, scan.detail_link_selector))
        return False


def _has_ancestor_in(element: PageElement, candidates: set[PageElement]) -> bool:
    parent = element.parent
    while parent is not None:
        if parent in candidates:
            return True
        parent = parent.parent
    return False
