"""
Rate-limited extraction loop.

Runs per-item extraction through a RateLimiter slot so consecutive items
are at least ``delay_seconds`` apart, after clamping the batch to the
platform's per-batch ceiling. There is no mid-batch cancellation, no
overall timeout and no retry.
"""

from typing import Callable, Sequence, TypeVar

from platform_extract.pacing.rate_limiter import RateLimiter
from platform_extract.utils.logging import get_logger
from platform_extract.utils.metrics import observe_pacing_wait

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class RateLimitedPipeline:
    """
    Paced loop over discovered item elements.

    Example:
        >>> pipeline = RateLimitedPipeline(limiter, "xiaohongshu", 2.0, 5)
        >>> limit = pipeline.clamp(50)   # 5
        >>> items = await pipeline.run(cards[:limit], extract_one)
    """

    def __init__(
        self,
        limiter: RateLimiter,
        key: str,
        delay_seconds: float,
        max_items_per_batch: int,
    ) -> None:
        self.limiter = limiter
        self.key = key
        self.delay_seconds = delay_seconds
        self.max_items_per_batch = max_items_per_batch

    def clamp(self, max_items: int) -> int:
        """Apply the per-batch ceiling; the ceiling always wins."""
        limit = min(max_items, self.max_items_per_batch)
        if limit < max_items:
            logger.info(
                f"Clamped {self.key} batch from {max_items} to {limit} item(s)"
            )
        return limit

    async def run(
        self,
        elements: Sequence[T],
        extract_one: Callable[[int, T], R | None],
    ) -> list[R]:
        """
        Extract ``elements`` in order, one paced slot each.

        Args:
            elements: Item elements in discovery order
            extract_one: Called with (1-based position, element); returns
                the item or None to skip it

        Returns:
            Non-None results in discovery order
        """
        results: list[R] = []
        for position, element in enumerate(elements, start=1):
            async with self.limiter.slot(self.key, self.delay_seconds) as waited:
                if waited:
                    observe_pacing_wait(waited * 1000, self.key)
                result = extract_one(position, element)
            if result is not None:
                results.append(result)
        return results
