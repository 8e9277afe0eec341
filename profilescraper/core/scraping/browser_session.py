"""Browser session lifecycle: one Chromium process per scrape run."""

from collections.abc import Callable

import structlog
from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

from profilescraper.config import settings
from profilescraper.core.scraping.page_query import PlaywrightPageQuery
from profilescraper.utils.exceptions import BrowserLaunchError

logger = structlog.get_logger(__name__)


class BrowserSessionManager:
    """
    Own one browser process and page for the duration of a scrape.

    Use as an async context manager so ``release()`` runs on every exit path,
    including errors and cancellation:

        async with BrowserSessionManager() as page:
            await page.goto(url)

    Sessions are never shared or reused; create a new manager per run.
    """

    def __init__(
        self,
        headless: bool | None = None,
        executable_path: str | None = None,
        launch_args: list[str] | None = None,
        navigation_timeout_ms: int | None = None,
        user_agent: str | None = None,
        business_id: str | None = None,
        playwright_factory: Callable[[], object] = async_playwright,
    ) -> None:
        """
        Initialize browser session manager.

        Args:
            headless: Run without a visible window (defaults to settings)
            executable_path: Chromium executable (defaults to settings)
            launch_args: Extra browser flags (defaults to settings)
            navigation_timeout_ms: Default navigation timeout (defaults to settings)
            user_agent: User agent override (defaults to settings)
            business_id: Business being scraped, attached to raised errors
            playwright_factory: Callable returning a Playwright context manager
        """
        self.headless = settings.browser_headless if headless is None else headless
        self.executable_path = executable_path or settings.browser_executable_path
        self.launch_args = (
            settings.browser_launch_args if launch_args is None else launch_args
        )
        self.navigation_timeout_ms = (
            navigation_timeout_ms
            if navigation_timeout_ms is not None
            else settings.navigation_timeout_ms
        )
        self.user_agent = user_agent or settings.browser_user_agent
        self.business_id = business_id
        self._playwright_factory = playwright_factory

        self._playwright: Playwright | None = None
        self.browser: Browser | None = None
        self.context: BrowserContext | None = None
        self.page: Page | None = None

    @property
    def is_active(self) -> bool:
        """True while a browser process is held."""
        return self.browser is not None

    async def acquire(self) -> PlaywrightPageQuery:
        """
        Launch the browser and open a page.

        Returns:
            Page query bound to the new page

        Raises:
            RuntimeError: If this manager already holds a browser
            BrowserLaunchError: If the browser cannot be started
        """
        if self.is_active:
            raise RuntimeError("Browser session already acquired")

        try:
            self._playwright = await self._playwright_factory().start()  # type: ignore[attr-defined]
            self.browser = await self._playwright.chromium.launch(
                headless=self.headless,
                executable_path=self.executable_path,
                args=self.launch_args,
            )
            self.context = await self.browser.new_context(user_agent=self.user_agent)
            self.context.set_default_navigation_timeout(self.navigation_timeout_ms)
            self.page = await self.context.new_page()
        except Exception as e:
            logger.error(
                "browser_launch_failed",
                business_id=self.business_id,
                executable_path=self.executable_path,
                error=str(e),
            )
            await self.release()
            raise BrowserLaunchError(
                f"Failed to launch browser: {e}", self.business_id
            ) from e
        except BaseException:
            # Cancelled mid-launch: __aexit__ will not run, so clean up here
            await self.release()
            raise

        logger.info(
            "browser_acquired",
            headless=self.headless,
            navigation_timeout_ms=self.navigation_timeout_ms,
        )
        return PlaywrightPageQuery(
            self.page, self.navigation_timeout_ms, business_id=self.business_id
        )

    async def release(self) -> None:
        """
        Close the page, context and browser, then stop Playwright.

        Safe to call more than once. A failure closing one layer does not stop
        the layers below it from being closed.
        """
        for name, resource in (
            ("page", self.page),
            ("context", self.context),
            ("browser", self.browser),
        ):
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception as e:
                logger.warning("browser_close_failed", resource=name, error=str(e))

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning("playwright_stop_failed", error=str(e))

        if self.browser is not None:
            logger.info("browser_released")

        self.page = None
        self.context = None
        self.browser = None
        self._playwright = None

    async def __aenter__(self) -> PlaywrightPageQuery:
        """Async context manager entry."""
        return await self.acquire()

    async def __aexit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> None:
        """Async context manager exit."""
        await self.release()
