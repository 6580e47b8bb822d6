"""
Pacing module.

Process-wide rate limiting and the rate-limited extraction loop.
"""

from platform_extract.pacing.rate_limiter import (
    PacingPhase,
    RateLimiter,
    RateLimitState,
)
from platform_extract.pacing.pipeline import RateLimitedPipeline

__all__ = [
    "PacingPhase",
    "RateLimiter",
    "RateLimitState",
    "RateLimitedPipeline",
]
