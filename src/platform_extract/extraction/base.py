"""
Abstract platform extractor.

A platform extractor knows how to recognize its pages, how to discover
item elements on them and which selector profile reads each item. The
shared batch logic lives here: max_items validation, the per-item error
boundary, metrics, and the choice between the immediate path and the
paced path.
"""

from abc import ABC, abstractmethod

from platform_extract.config.settings import PlatformSettings, Settings
from platform_extract.dom.base import PageDocument, PageElement
from platform_extract.extraction.item_extractor import ItemExtractor, SelectorProfile
from platform_extract.extraction.locator import ElementLocator
from platform_extract.extraction.models import ExtractedItem, ExtractionResult
from platform_extract.pacing import RateLimitedPipeline, RateLimiter
from platform_extract.utils.logging import get_logger_with_context
from platform_extract.utils.metrics import (
    increment_item_failures,
    increment_items_dropped,
    increment_items_extracted,
)


class PlatformExtractor(ABC):
    """
    Base class for platform extractors.

    Subclasses set ``platform`` and ``origin`` and implement can_handle(),
    discover_items() and profile().

    Example:
        >>> extractor = XiaohongshuExtractor(settings, rate_limiter)
        >>> if extractor.can_handle(document):
        ...     result = await extractor.extract_async(document, max_items=5)
    """

    platform: str = ""
    origin: str = ""

    def __init__(
        self,
        settings: Settings | None = None,
        rate_limiter: RateLimiter | None = None,
        locator: ElementLocator | None = None,
    ) -> None:
        settings = settings or Settings()
        self.settings: PlatformSettings = settings.platform(self.platform)
        self.extraction_settings = settings.extraction
        self.rate_limiter = rate_limiter or RateLimiter()
        self.locator = locator or ElementLocator()
        self.item_extractor = self.create_item_extractor()
        self.logger = get_logger_with_context(__name__, platform=self.platform)

    # -- Platform hooks -----------------------------------------------------

    @abstractmethod
    def can_handle(self, document: PageDocument) -> bool:
        """Whether this extractor owns the page. Depends only on the URL."""

    @abstractmethod
    def discover_items(self, document: PageDocument) -> list[PageElement]:
        """Candidate item elements in document order."""

    @abstractmethod
    def profile(self) -> SelectorProfile:
        """Selector cascades used for each item."""

    def is_detail_page(self, document: PageDocument) -> bool:
        return False

    def create_item_extractor(self) -> ItemExtractor:
        return ItemExtractor(self.profile(), self.extraction_settings, self.locator)

    # -- Public API ---------------------------------------------------------

    def extract(
        self,
        document: PageDocument,
        max_items: int = 5,
        fetch_full_content: bool = False,
    ) -> ExtractionResult:
        """
        Extract up to ``max_items`` items immediately, without pacing.

        Raises:
            ValueError: If max_items is negative
        """
        _validate_max_items(max_items)
        try:
            elements = self.discover_items(document)
            detail_page = self.is_detail_page(document)
            items = []
            for position, element in enumerate(elements[:max_items], start=1):
                item = self._extract_one(
                    element, position, fetch_full_content, document, detail_page
                )
                if item is not None:
                    items.append(item)
            return self._build_result(document, items, len(elements))
        except Exception as e:
            return self._failure(document, e)

    async def extract_async(
        self,
        document: PageDocument,
        max_items: int = 5,
        fetch_full_content: bool = False,
    ) -> ExtractionResult:
        """
        Extract items through the shared rate limiter.

        ``max_items`` is clamped to the platform's per-batch ceiling first.
        Platforms that are not rate limited use extract() directly.

        Raises:
            ValueError: If max_items is negative
        """
        _validate_max_items(max_items)
        if not self.settings.rate_limited:
            return self.extract(document, max_items, fetch_full_content)

        try:
            pipeline = RateLimitedPipeline(
                self.rate_limiter,
                self.platform,
                self.settings.rate_limit_delay_seconds,
                self.settings.max_items_per_batch,
            )
            limit = pipeline.clamp(max_items)
            elements = self.discover_items(document)
            detail_page = self.is_detail_page(document)
            self.logger.info(
                f"Extracting up to {limit} of {len(elements)} item(s), "
                f"{self.settings.rate_limit_delay_seconds}s apart"
            )
            items = await pipeline.run(
                elements[:limit],
                lambda position, element: self._extract_one(
                    element, position, fetch_full_content, document, detail_page
                ),
            )
            return self._build_result(document, items, len(elements))
        except Exception as e:
            return self._failure(document, e)

    # -- Internals ----------------------------------------------------------

    def _extract_one(
        self,
        element: PageElement,
        index: int,
        fetch_full_content: bool,
        document: PageDocument,
        detail_page: bool,
    ) -> ExtractedItem | None:
        try:
            item = self.item_extractor.extract_item(
                element, index, fetch_full_content, document, detail_page
            )
        except Exception as e:
            self.logger.warning(f"Skipping item {index}: {e}")
            increment_item_failures(self.platform)
            return None

        if item is None:
            self.logger.debug(f"Dropped item {index}: content too short")
            increment_items_dropped(self.platform)
        else:
            increment_items_extracted(self.platform)
        return item

    def _build_result(
        self,
        document: PageDocument,
        items: list[ExtractedItem],
        total_found: int,
    ) -> ExtractionResult:
        self.logger.info(f"Extracted {len(items)} item(s) from {total_found} candidate(s)")
        return ExtractionResult(
            items=items,
            total_found=total_found,
            page_url=document.url,
            page_title=document.title,
            platform=self.platform,
        )

    def _failure(self, document: PageDocument, error: Exception) -> ExtractionResult:
        self.logger.error(f"Extraction failed: {error}", exc_info=True)
        page_url, page_title = _page_details(document)
        return ExtractionResult.failure(
            str(error), self.platform, page_url=page_url, page_title=page_title
        )


def _validate_max_items(max_items: int) -> None:
    if max_items < 0:
        raise ValueError(f"max_items must be non-negative, got {max_items}")


def _page_details(document: PageDocument) -> tuple[str, str]:
    """URL and title for a failed result, empty when the page is unusable."""
    details = []
    for name in ("url", "title"):
        try:
            details.append(getattr(document, name) or "")
        except Exception:
            details.append("")
    return details[0], details[1]
