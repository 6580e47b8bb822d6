"""
Playwright browser lifecycle for loading target pages.

The extraction engine itself never touches a browser; this module is the
outer surface that turns a URL into a PageDocument snapshot for the CLI
and for full-content resolution.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Playwright,
)

from platform_extract.browser.page_context import PageContext
from platform_extract.config.settings import BrowserSettings
from platform_extract.core.exceptions import BrowserError, FullContentFetchError
from platform_extract.dom.soup import SoupDocument
from platform_extract.extraction.resolver import DocumentFetcher
from platform_extract.utils.logging import get_logger

logger = get_logger(__name__)


class BrowserManager:
    """
    Owns one Playwright browser and one browsing context.

    A single context keeps cookies between the list page and the detail
    pages opened for full content.

    Example:
        >>> async with BrowserManager(settings.browser) as browser:
        ...     async with browser.open_page() as page:
        ...         await page.navigate(url, wait_ms=5000)
        ...         document = await page.snapshot()
    """

    def __init__(self, settings: BrowserSettings) -> None:
        self.settings = settings
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    async def start(self) -> None:
        """
        Launch the configured browser engine.

        Raises:
            BrowserError: If the browser cannot be launched
        """
        if self._browser is not None:
            logger.warning("Browser already started")
            return

        try:
            logger.info(
                f"Launching {self.settings.browser_type} "
                f"(headless={self.settings.headless})"
            )
            self._playwright = await async_playwright().start()
            engine = getattr(self._playwright, self.settings.browser_type)
            self._browser = await engine.launch(headless=self.settings.headless)
            self._context = await self._browser.new_context(**self._context_options())
            self._context.set_default_timeout(self.settings.timeout_ms)
            self._context.set_default_navigation_timeout(
                self.settings.navigation_timeout_ms
            )
        except Exception as e:
            await self._cleanup()
            raise BrowserError(
                f"Failed to launch browser: {e}",
                details={"browser_type": self.settings.browser_type},
            ) from e

    def _context_options(self) -> dict:
        options: dict = {
            "viewport": {
                "width": self.settings.viewport_width,
                "height": self.settings.viewport_height,
            },
        }
        if self.settings.locale:
            options["locale"] = self.settings.locale
        if self.settings.user_agent:
            options["user_agent"] = self.settings.user_agent
        return options

    async def stop(self) -> None:
        """Close the browser. Safe to call more than once."""
        await self._cleanup()
        logger.info("Browser stopped")

    async def _cleanup(self) -> None:
        for name in ("_context", "_browser"):
            resource = getattr(self, name)
            if resource is not None:
                try:
                    await resource.close()
                except Exception as e:
                    logger.warning(f"Error closing {name.lstrip('_')}: {e}")
                setattr(self, name, None)

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")
            self._playwright = None

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[PageContext]:
        """
        A fresh tab, closed on exit.

        Raises:
            BrowserError: If the browser is not started
        """
        if self._context is None:
            raise BrowserError("Browser not started. Call start() first.")

        page = PageContext(await self._context.new_page())
        try:
            yield page
        finally:
            await page.close()

    async def load_document(self, url: str, wait_ms: int = 0) -> SoupDocument:
        """Open ``url`` in a new tab and return its rendered snapshot."""
        async with self.open_page() as page:
            await page.navigate(
                url, wait_ms=wait_ms, wait_until=self.settings.wait_until
            )
            return await page.snapshot()

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()


def make_document_fetcher(manager: BrowserManager, wait_ms: int = 0) -> DocumentFetcher:
    """
    Adapt a running BrowserManager to the full-content resolver.

    Browser failures surface as FullContentFetchError.

    Example:
        >>> resolver = FullContentResolver(make_document_fetcher(browser, 5000))
    """

    async def fetch_document(url: str) -> SoupDocument:
        try:
            return await manager.load_document(url, wait_ms=wait_ms)
        except BrowserError as e:
            raise FullContentFetchError(e.message, url=url, details=e.details) from e

    return fetch_document
