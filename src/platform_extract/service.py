"""
Extraction service: the single entry point used by the CLI.

Selects the extractor for a page, applies the platform's defaults, runs
the paced or immediate path and, when a document fetcher is available,
resolves full-content markers. Every call is timed in metrics.
"""

from platform_extract.config.loader import get_settings
from platform_extract.config.settings import Settings
from platform_extract.dom.base import PageDocument
from platform_extract.extraction.models import ExtractionResult
from platform_extract.extraction.registry import ExtractorRegistry
from platform_extract.extraction.resolver import DocumentFetcher, FullContentResolver
from platform_extract.pacing import RateLimiter
from platform_extract.utils.logging import get_logger
from platform_extract.utils.metrics import time_extraction

logger = get_logger(__name__)


class ExtractionService:
    """
    Page-level extraction orchestration.

    One service holds one rate limiter, shared by every extractor in its
    registry and by the full-content resolver.

    Example:
        >>> service = ExtractionService(fetch_document=make_document_fetcher(browser))
        >>> result = await service.extract(document)
        >>> print(result.to_dict())
    """

    def __init__(
        self,
        settings: Settings | None = None,
        registry: ExtractorRegistry | None = None,
        rate_limiter: RateLimiter | None = None,
        fetch_document: DocumentFetcher | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.registry = registry or ExtractorRegistry.create(
            self.settings, self.rate_limiter
        )
        self.resolver: FullContentResolver | None = None
        if fetch_document is not None:
            self.resolver = FullContentResolver(
                fetch_document, self.settings, self.rate_limiter
            )

    async def extract(
        self,
        document: PageDocument,
        max_items: int | None = None,
        fetch_full_content: bool | None = None,
        paced: bool = True,
        platform: str | None = None,
    ) -> ExtractionResult:
        """
        Extract items from a page.

        Args:
            document: Page to extract from
            max_items: Items wanted; the platform default when None
            fetch_full_content: Full instead of preview content; the
                platform default when None
            paced: Use the rate-limited path
            platform: Force an extractor by name instead of matching the URL

        Returns:
            The result; ``success=False`` for unsupported pages and failed
            batches

        Raises:
            UnsupportedPlatformError: If ``platform`` names no extractor
            ValueError: If max_items is negative
        """
        if platform is not None:
            extractor = self.registry.require(platform)
        else:
            extractor = self.registry.select_extractor(document)

        if extractor is None:
            logger.info(f"Unsupported page: {document.url}")
            return ExtractionResult.unsupported(document.url, document.title)

        policy = extractor.settings
        if max_items is None:
            max_items = policy.default_max_items
        if fetch_full_content is None:
            fetch_full_content = policy.default_fetch_full_content

        with time_extraction(extractor.platform):
            if paced:
                result = await extractor.extract_async(
                    document, max_items, fetch_full_content
                )
            else:
                result = extractor.extract(document, max_items, fetch_full_content)

            if result.success and self.resolver is not None:
                result = await self.resolver.resolve(result)

        return result

    def list_platforms(self) -> list[str]:
        return self.registry.list_platforms()
