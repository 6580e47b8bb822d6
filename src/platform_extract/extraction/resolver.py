"""
Full-content resolution for list-page results.

Items extracted from a list page in full-content mode carry a marker with
their detail URL instead of a body. FullContentResolver loads each detail
page through a caller-supplied fetcher (a Playwright page in the CLI, a
fake in tests) and replaces the marker with the page's content. Fetches
are paced with the same rate limiter key as the platform itself.
"""

from dataclasses import replace
from typing import Awaitable, Callable

from platform_extract.config.settings import Settings
from platform_extract.core.exceptions import FullContentFetchError
from platform_extract.dom.base import PageDocument
from platform_extract.extraction.full_content import extract_full_page_content
from platform_extract.extraction.item_extractor import DEFAULT_FULL_CONTENT_SELECTORS
from platform_extract.extraction.models import ExtractedItem, ExtractionResult
from platform_extract.pacing import RateLimiter
from platform_extract.utils.logging import get_logger
from platform_extract.utils.metrics import observe_pacing_wait

logger = get_logger(__name__)

DocumentFetcher = Callable[[str], Awaitable[PageDocument]]

FETCH_FAILED_TEMPLATE = "[Could not fetch full content: {message}]"


class FullContentResolver:
    """
    Replaces full-content markers with detail-page content.

    Example:
        >>> resolver = FullContentResolver(fetch_document, settings, limiter)
        >>> result = await resolver.resolve(result)
    """

    def __init__(
        self,
        fetch_document: DocumentFetcher,
        settings: Settings | None = None,
        rate_limiter: RateLimiter | None = None,
        selectors: tuple[str, ...] = DEFAULT_FULL_CONTENT_SELECTORS,
    ) -> None:
        self._fetch_document = fetch_document
        self.settings = settings or Settings()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.selectors = selectors

    async def resolve(self, result: ExtractionResult) -> ExtractionResult:
        """
        Return a copy of ``result`` with every marker resolved.

        Items without a marker are passed through untouched. A fetch
        failure does not fail the result; the item's content says what
        went wrong instead.
        """
        pending = result.pending_full_content
        if not pending:
            return result

        delay = self.settings.platform(result.platform).rate_limit_delay_seconds
        logger.info(f"Resolving full content for {len(pending)} item(s)")

        items: list[ExtractedItem] = []
        for item in result.items:
            url = item.full_content_url
            if url is None:
                items.append(item)
                continue

            async with self.rate_limiter.slot(result.platform, delay) as waited:
                if waited:
                    observe_pacing_wait(waited * 1000, result.platform)
                content = await self.fetch_content(url)
            items.append(item.with_content(content) if content else item)

        return replace(result, items=items)

    async def fetch_content(self, url: str) -> str:
        """Load a detail page and return its content, or a failure note."""
        try:
            document = await self._fetch_document(url)
        except Exception as e:
            error = (
                e
                if isinstance(e, FullContentFetchError)
                else FullContentFetchError(str(e), url=url)
            )
            logger.warning(f"Full content fetch failed: {error}")
            return FETCH_FAILED_TEMPLATE.format(message=error.message)

        content = extract_full_page_content(
            document,
            self.selectors,
            self.settings.extraction.full_content_max_length,
        )
        logger.debug(f"Fetched {len(content)} chars of full content from {url}")
        return content
