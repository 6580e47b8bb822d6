"""
Page wrapper that produces extraction snapshots.

Target sites render their cards client-side, so navigation is followed
by a fixed settle wait (the platform's page_load_wait_ms). snapshot()
then writes each image's rendered size into data attributes before
capturing the HTML, which lets the offline document tell content images
from icons.
"""

import time

from playwright.async_api import Page, Response

from platform_extract.core.exceptions import NavigationError, PageLoadError
from platform_extract.dom.soup import SoupDocument
from platform_extract.utils.logging import get_logger

logger = get_logger(__name__)

_ANNOTATE_IMAGE_SIZES = """
() => {
    let count = 0;
    document.querySelectorAll('img').forEach(img => {
        const rect = img.getBoundingClientRect();
        img.setAttribute('data-rendered-width', Math.round(rect.width));
        img.setAttribute('data-rendered-height', Math.round(rect.height));
        count += 1;
    });
    return count;
}
"""


class PageContext:
    """
    Wrapper around a Playwright Page.

    Example:
        >>> page = PageContext(await context.new_page())
        >>> await page.navigate("https://www.google.com/search?q=python", wait_ms=2000)
        >>> document = await page.snapshot()
    """

    def __init__(self, page: Page) -> None:
        self.page = page
        self._last_response: Response | None = None

    @property
    def current_url(self) -> str:
        return self.page.url

    async def navigate(
        self,
        url: str,
        wait_ms: int = 0,
        wait_until: str = "domcontentloaded",
    ) -> Response | None:
        """
        Go to ``url`` and let client-side rendering settle.

        Args:
            url: Target URL
            wait_ms: Extra wait after the load state is reached
            wait_until: Playwright load state to wait for

        Raises:
            NavigationError: On HTTP errors, timeouts and network failures
        """
        start_time = time.perf_counter()

        try:
            logger.debug(f"Navigating to: {url}")
            response = await self.page.goto(url, wait_until=wait_until)
            self._last_response = response
        except Exception as e:
            message = str(e)
            if "timeout" in message.lower():
                raise NavigationError(f"Navigation timeout: {message}", url=url) from e
            raise NavigationError(f"Navigation failed: {message}", url=url) from e

        if response is not None and response.status >= 400:
            raise NavigationError(
                f"HTTP {response.status} error",
                url=url,
                status_code=response.status,
            )

        if wait_ms:
            await self.page.wait_for_timeout(wait_ms)

        elapsed = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Page ready in {elapsed:.0f}ms")
        return response

    async def snapshot(self) -> SoupDocument:
        """
        Capture the current page as a SoupDocument.

        Raises:
            PageLoadError: If the page content cannot be read
        """
        try:
            annotated = await self.page.evaluate(_ANNOTATE_IMAGE_SIZES)
            html = await self.page.content()
            title = await self.page.title()
        except Exception as e:
            raise PageLoadError(
                f"Failed to capture page: {e}",
                url=self.page.url,
            ) from e

        logger.debug(f"Captured {len(html)} chars, {annotated} image(s) measured")
        return SoupDocument(html, url=self.page.url, title=title)

    async def close(self) -> None:
        try:
            await self.page.close()
        except Exception as e:
            logger.warning(f"Error closing page: {e}")
