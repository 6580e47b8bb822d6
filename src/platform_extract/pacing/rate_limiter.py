"""
Process-wide pacing state for item extraction.

Target platforms do not answer too-fast automation with an error; they
quietly redirect or block. The limiter therefore bounds the aggregate
rate per platform across every extraction call in the process, not just
within one call: a second batch started right after a first one still
waits out the delay.

One RateLimiter is created at startup (by the registry or the caller) and
shared by reference with every extractor. Clock and sleep are injectable
so tests can drive time by hand.
"""

import asyncio
import time
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable

from platform_extract.utils.logging import get_logger

logger = get_logger(__name__)


class PacingPhase(str, Enum):
    """Lifecycle of one key: Idle -> Waiting -> Extracting -> Idle."""

    IDLE = "idle"
    WAITING = "waiting"
    EXTRACTING = "extracting"


@dataclass
class RateLimitState:
    """
    Pacing state for one platform key.

    Attributes:
        last_request_time: Clock reading when the last item finished,
            None before the first item of the session
        request_count: Items paced through this key since startup
        phase: Current lifecycle phase
    """

    last_request_time: float | None = None
    request_count: int = 0
    phase: PacingPhase = PacingPhase.IDLE


class RateLimiter:
    """
    Minimum-delay limiter keyed by platform name.

    Example:
        >>> limiter = RateLimiter()
        >>> async with limiter.slot("xiaohongshu", delay_seconds=2.0):
        ...     item = extract(card)
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self._states: dict[str, RateLimitState] = defaultdict(RateLimitState)
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def acquire(self, key: str, delay_seconds: float) -> float:
        """
        Wait until ``delay_seconds`` have passed since the last item.

        Never waits for the first item of the session.

        Returns:
            Seconds waited
        """
        state = self._states[key]
        if state.last_request_time is None:
            return 0.0

        elapsed = self._clock() - state.last_request_time
        if elapsed >= delay_seconds:
            return 0.0

        wait_time = delay_seconds - elapsed
        state.phase = PacingPhase.WAITING
        logger.debug(f"Pacing {key}: waiting {wait_time:.2f}s")
        await self._sleep(wait_time)
        return wait_time

    def record(self, key: str) -> None:
        """Mark an item as done: stamp the time and bump the counter."""
        state = self._states[key]
        state.last_request_time = self._clock()
        state.request_count += 1
        state.phase = PacingPhase.IDLE
        logger.debug(f"Pacing {key}: {state.request_count} item(s) this session")

    @asynccontextmanager
    async def slot(self, key: str, delay_seconds: float) -> AsyncIterator[float]:
        """
        Hold the key for one item: wait, run the body, then record.

        Concurrent callers on the same key are serialized so two batches
        cannot interleave inside the delay window. The item is recorded
        even when the body raises.

        Yields:
            Seconds waited before the body ran
        """
        async with self._locks[key]:
            waited = await self.acquire(key, delay_seconds)
            self._states[key].phase = PacingPhase.EXTRACTING
            try:
                yield waited
            finally:
                self.record(key)

    def get_state(self, key: str) -> RateLimitState | None:
        return self._states.get(key)

    def get_stats(self, key: str | None = None) -> dict:
        """Request counts and phases for one key or all keys."""
        if key is not None:
            state = self._states.get(key, RateLimitState())
            return {
                "key": key,
                "request_count": state.request_count,
                "last_request_time": state.last_request_time,
                "phase": state.phase.value,
            }

        return {
            "total_requests": sum(s.request_count for s in self._states.values()),
            "keys": {
                name: {
                    "request_count": state.request_count,
                    "phase": state.phase.value,
                }
                for name, state in self._states.items()
            },
        }

    def reset(self, key: str | None = None) -> None:
        """Forget pacing state for one key, or for all keys."""
        if key is not None:
            self._states.pop(key, None)
        else:
            self._states.clear()
