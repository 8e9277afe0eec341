"""Page query capability used by the extraction pipeline.

The pipeline only talks to a ``PageQuery``; the Playwright implementation
below is the one used in production.
"""

from typing import Protocol

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from profilescraper.utils.exceptions import NavigationError

logger = structlog.get_logger(__name__)

_TEXT_SCRIPT = "elements => elements.map(el => (el.textContent || '').trim())"
_ATTRIBUTE_SCRIPT = "(elements, name) => elements.map(el => el.getAttribute(name) || '')"


class PageQuery(Protocol):
    """Navigate a page and read text out of it by selector."""

    async def goto(self, url: str) -> None:
        """Load ``url``, raising if it cannot be loaded."""
        ...

    async def query_text(self, selector: str) -> list[str]:
        """Return the trimmed text of every element matching ``selector``."""
        ...

    async def query_attribute(self, selector: str, name: str) -> list[str]:
        """Return attribute ``name`` of every element matching ``selector``."""
        ...


class PlaywrightPageQuery:
    """PageQuery backed by a Playwright page."""

    def __init__(
        self,
        page: Page,
        navigation_timeout_ms: int = 60000,
        business_id: str | None = None,
    ) -> None:
        """
        Initialize page query.

        Args:
            page: Open Playwright page
            navigation_timeout_ms: Timeout for each ``goto`` call
            business_id: Business being scraped, attached to navigation errors
        """
        self.page = page
        self.navigation_timeout_ms = navigation_timeout_ms
        self.business_id = business_id

    async def goto(self, url: str) -> None:
        """
        Navigate to a URL and wait for the DOM to load.

        Args:
            url: Absolute URL to load

        Raises:
            NavigationError: If the server answers with an error status
            playwright.async_api.TimeoutError: If the page does not load in time
        """
        response = await self.page.goto(
            url, wait_until="domcontentloaded", timeout=self.navigation_timeout_ms
        )
        if response is not None and response.status >= 400:
            raise NavigationError(url, response.status, business_id=self.business_id)

    async def query_text(self, selector: str) -> list[str]:
        try:
            return await self.page.eval_on_selector_all(selector, _TEXT_SCRIPT)
        except PlaywrightError as e:
            # Malformed selector or a page torn down mid-query
            logger.warning("selector_query_failed", selector=selector, error=str(e))
            return []

    async def query_attribute(self, selector: str, name: str) -> list[str]:
        try:
            return await self.page.eval_on_selector_all(selector, _ATTRIBUTE_SCRIPT, name)
        except PlaywrightError as e:
            logger.warning(
                "selector_query_failed", selector=selector, attribute=name, error=str(e)
            )
            return []
