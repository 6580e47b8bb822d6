"""
Extractor registry.

Holds platform extractors in priority order and picks the first one that
claims the current page. Adding a platform means registering one more
extractor; the dispatch never changes.
"""

from platform_extract.config.settings import Settings
from platform_extract.core.exceptions import UnsupportedPlatformError
from platform_extract.dom.base import PageDocument
from platform_extract.extraction.base import PlatformExtractor
from platform_extract.extraction.platforms import (
    GoogleSearchExtractor,
    XiaohongshuExtractor,
)
from platform_extract.pacing import RateLimiter
from platform_extract.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_EXTRACTORS: tuple[type[PlatformExtractor], ...] = (
    XiaohongshuExtractor,
    GoogleSearchExtractor,
)


class ExtractorRegistry:
    """
    Ordered collection of platform extractors.

    Example:
        >>> registry = ExtractorRegistry.create(get_settings())
        >>> extractor = registry.select_extractor(document)
        >>> if extractor is None:
        ...     print("unsupported page")
    """

    def __init__(self, extractors: list[PlatformExtractor] | None = None) -> None:
        self._extractors: list[PlatformExtractor] = list(extractors or [])

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> "ExtractorRegistry":
        """
        Build the default registry.

        All extractors share one rate limiter so pacing holds across
        every call made through this registry.
        """
        settings = settings or Settings()
        rate_limiter = rate_limiter or RateLimiter()
        registry = cls()
        for extractor_cls in DEFAULT_EXTRACTORS:
            registry.register(extractor_cls(settings, rate_limiter))
        return registry

    def register(self, extractor: PlatformExtractor) -> None:
        """Append an extractor; earlier registrations take priority."""
        self._extractors.append(extractor)
        logger.debug(f"Registered extractor: {extractor.platform}")

    def select_extractor(self, document: PageDocument) -> PlatformExtractor | None:
        """First extractor that handles the page, or None."""
        for extractor in self._extractors:
            if extractor.can_handle(document):
                logger.debug(f"Selected {extractor.platform} for {document.url}")
                return extractor
        logger.debug(f"No extractor for {document.url}")
        return None

    def list_platforms(self) -> list[str]:
        return [extractor.platform for extractor in self._extractors]

    def get_by_platform(self, name: str) -> PlatformExtractor | None:
        for extractor in self._extractors:
            if extractor.platform == name:
                return extractor
        return None

    def is_supported(self, name: str) -> bool:
        return self.get_by_platform(name) is not None

    def require(self, name: str) -> PlatformExtractor:
        """
        Strict lookup by platform name.

        Raises:
            UnsupportedPlatformError: If no extractor has that name
        """
        extractor = self.get_by_platform(name)
        if extractor is None:
            raise UnsupportedPlatformError(
                f"Unsupported platform: {name}",
                platform=name,
                supported=self.list_platforms(),
            )
        return extractor

    def __len__(self) -> int:
        return len(self._extractors)
