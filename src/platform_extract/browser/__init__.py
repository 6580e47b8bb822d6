"""
Browser module for the platform extraction engine.

Provides Playwright-based page loading:
- Browser lifecycle management
- Rendered page snapshots as PageDocuments
- Document fetcher for full-content resolution
"""

from platform_extract.browser.manager import BrowserManager, make_document_fetcher
from platform_extract.browser.page_context import PageContext

__all__ = [
    "BrowserManager",
    "PageContext",
    "make_document_fetcher",
]
