"""
Tests for the rate limiter and the paced extraction pipeline.

Time is driven by the FakeClock fixture, so every wait is observed
exactly and no test actually sleeps.
"""

import asyncio

import pytest

from platform_extract.config import Settings
from platform_extract.dom import SoupDocument
from platform_extract.extraction.platforms import XiaohongshuExtractor
from platform_extract.pacing import (
    PacingPhase,
    RateLimitedPipeline,
    RateLimiter,
    RateLimitState,
)
from platform_extract.utils.metrics import Metrics

from tests.conftest import XHS_SEARCH_URL


@pytest.fixture
def limiter(fake_clock) -> RateLimiter:
    return RateLimiter(clock=fake_clock, sleep=fake_clock.sleep)


def note_cards_page(count: int) -> SoupDocument:
    cards = "".join(
        f'<section class="note-item"><a class="title" href="/explore/n{i}">'
        f"<span>Weekend recipe number {i} with plenty of detail</span></a></section>"
        for i in range(1, count + 1)
    )
    return SoupDocument(f"<html><body>{cards}</body></html>", url=XHS_SEARCH_URL)


class TestRateLimitState:
    """Tests for the per-key state record."""

    def test_defaults(self):
        state = RateLimitState()

        assert state.last_request_time is None
        assert state.request_count == 0
        assert state.phase == PacingPhase.IDLE


class TestRateLimiter:
    """Tests for acquire/record and the slot context manager."""

    @pytest.mark.asyncio
    async def test_first_item_never_waits(self, limiter: RateLimiter, fake_clock):
        waited = await limiter.acquire("xiaohongshu", 2.0)

        assert waited == 0.0
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_waits_out_remaining_delay(self, limiter: RateLimiter, fake_clock):
        limiter.record("xiaohongshu")
        fake_clock.advance(0.5)

        waited = await limiter.acquire("xiaohongshu", 2.0)

        assert waited == pytest.approx(1.5)
        assert fake_clock.sleeps == [pytest.approx(1.5)]

    @pytest.mark.asyncio
    async def test_no_wait_after_delay_passed(self, limiter: RateLimiter, fake_clock):
        limiter.record("xiaohongshu")
        fake_clock.advance(3.0)

        assert await limiter.acquire("xiaohongshu", 2.0) == 0.0

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, limiter: RateLimiter, fake_clock):
        limiter.record("xiaohongshu")

        assert await limiter.acquire("google", 2.0) == 0.0
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_slot_phases_and_record(self, limiter: RateLimiter):
        async with limiter.slot("xiaohongshu", 2.0):
            assert limiter.get_state("xiaohongshu").phase == PacingPhase.EXTRACTING

        state = limiter.get_state("xiaohongshu")
        assert state.phase == PacingPhase.IDLE
        assert state.request_count == 1
        assert state.last_request_time == 1000.0

    @pytest.mark.asyncio
    async def test_slot_records_when_body_raises(self, limiter: RateLimiter):
        with pytest.raises(RuntimeError):
            async with limiter.slot("xiaohongshu", 2.0):
                raise RuntimeError("card vanished")

        assert limiter.get_state("xiaohongshu").request_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_slots_are_serialized(self, limiter: RateLimiter, fake_clock):
        async def one_item():
            async with limiter.slot("xiaohongshu", 2.0):
                await asyncio.sleep(0)

        await asyncio.gather(one_item(), one_item())

        assert fake_clock.sleeps == [2.0]
        assert limiter.get_state("xiaohongshu").request_count == 2

    def test_stats_and_reset(self, limiter: RateLimiter):
        limiter.record("xiaohongshu")
        limiter.record("xiaohongshu")
        limiter.record("google")

        assert limiter.get_stats("xiaohongshu")["request_count"] == 2
        assert limiter.get_stats("weibo")["request_count"] == 0
        assert limiter.get_stats()["total_requests"] == 3

        limiter.reset("google")
        assert limiter.get_state("google") is None
        assert limiter.get_stats()["total_requests"] == 2

        limiter.reset()
        assert limiter.get_stats()["keys"] == {}


class TestRateLimitedPipeline:
    """Tests for clamping and paced iteration."""

    @pytest.mark.parametrize(
        "requested,expected",
        [(0, 0), (3, 3), (5, 5), (6, 5), (50, 5)],
    )
    def test_clamp(self, limiter: RateLimiter, requested: int, expected: int):
        pipeline = RateLimitedPipeline(limiter, "xiaohongshu", 2.0, 5)

        assert pipeline.clamp(requested) == expected

    @pytest.mark.parametrize("count", [1, 2, 3, 5])
    @pytest.mark.asyncio
    async def test_consecutive_items_spaced(self, limiter: RateLimiter, fake_clock, count: int):
        """N items take at least (N - 1) delays of elapsed time."""
        pipeline = RateLimitedPipeline(limiter, "xiaohongshu", 2.0, 5)
        start = fake_clock()

        results = await pipeline.run(list(range(count)), lambda pos, n: pos)

        assert results == list(range(1, count + 1))
        assert fake_clock() - start >= (count - 1) * 2.0
        assert fake_clock.sleeps == [2.0] * (count - 1)

    @pytest.mark.asyncio
    async def test_none_results_skipped_but_paced(self, limiter: RateLimiter, fake_clock):
        pipeline = RateLimitedPipeline(limiter, "xiaohongshu", 2.0, 5)

        results = await pipeline.run(
            ["a", "b", "c"], lambda pos, value: None if value == "b" else value
        )

        assert results == ["a", "c"]
        assert len(fake_clock.sleeps) == 2
        assert Metrics.get().get_timing("pacing_wait_ms").count == 2


class TestPacedExtraction:
    """Tests for extract_async on a rate-limited platform."""

    @pytest.fixture
    def extractor(self, test_settings: Settings, limiter: RateLimiter) -> XiaohongshuExtractor:
        return XiaohongshuExtractor(test_settings, limiter)

    @pytest.mark.asyncio
    async def test_paced_preview(
        self, extractor: XiaohongshuExtractor, xhs_search_page, fake_clock
    ):
        result = await extractor.extract_async(
            xhs_search_page, max_items=5, fetch_full_content=False
        )

        assert [item.index for item in result.items] == [1, 3]
        # Every processed card takes a slot, dropped ones included
        assert fake_clock.sleeps == [2.0, 2.0]
        assert extractor.rate_limiter.get_stats("xiaohongshu")["request_count"] == 3

    @pytest.mark.asyncio
    async def test_batch_clamped_to_ceiling(self, extractor: XiaohongshuExtractor, fake_clock):
        result = await extractor.extract_async(note_cards_page(8), max_items=50)

        assert result.total_found == 8
        assert [item.index for item in result.items] == [1, 2, 3, 4, 5]
        assert len(fake_clock.sleeps) == 4

    @pytest.mark.asyncio
    async def test_pacing_carries_across_calls(
        self, extractor: XiaohongshuExtractor, fake_clock
    ):
        """A second batch right after the first still waits out the delay."""
        page = note_cards_page(2)

        await extractor.extract_async(page, max_items=1)
        assert fake_clock.sleeps == []

        fake_clock.advance(0.5)
        await extractor.extract_async(page, max_items=1)

        assert fake_clock.sleeps == [pytest.approx(1.5)]

    @pytest.mark.asyncio
    async def test_no_wait_after_idle_period(self, extractor: XiaohongshuExtractor, fake_clock):
        page = note_cards_page(1)

        await extractor.extract_async(page, max_items=1)
        fake_clock.advance(10.0)
        await extractor.extract_async(page, max_items=1)

        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_configured_delay_used(self, fake_clock):
        settings = Settings(
            xiaohongshu={"rate_limited": True, "rate_limit_delay_seconds": 3.5}
        )
        extractor = XiaohongshuExtractor(
            settings, RateLimiter(clock=fake_clock, sleep=fake_clock.sleep)
        )

        await extractor.extract_async(note_cards_page(3), max_items=3)

        assert fake_clock.sleeps == [3.5, 3.5]

    @pytest.mark.asyncio
    async def test_negative_max_items(self, extractor: XiaohongshuExtractor):
        with pytest.raises(ValueError):
            await extractor.extract_async(note_cards_page(1), max_items=-2)
