"""
Utilities module for the platform extraction engine.

Provides logging setup and in-memory metrics.
"""

from platform_extract.utils.logging import (
    setup_logging,
    get_logger,
    get_logger_with_context,
)
from platform_extract.utils.metrics import (
    Metrics,
    TimingStats,
    increment_items_extracted,
    increment_items_dropped,
    increment_item_failures,
    observe_pacing_wait,
    time_extraction,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "get_logger_with_context",
    # Metrics
    "Metrics",
    "TimingStats",
    "increment_items_extracted",
    "increment_items_dropped",
    "increment_item_failures",
    "observe_pacing_wait",
    "time_extraction",
]
