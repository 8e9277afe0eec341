"""Extraction pipeline: drive the browser across the home and FAQ pages."""

import asyncio
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import TypeVar

import structlog

from profilescraper.config import settings
from profilescraper.core.scraping.browser_session import BrowserSessionManager
from profilescraper.core.scraping.extraction import (
    EMAIL_FALLBACK_SELECTORS,
    PHONE_FALLBACK_SELECTORS,
    build_contact,
    contact_value,
    filter_services,
    pair_faqs,
)
from profilescraper.core.scraping.page_query import PageQuery
from profilescraper.core.scraping.results import (
    NOT_FOUND,
    ExtractedContact,
    ExtractedFAQ,
    ExtractedService,
    ScrapeResult,
)
from profilescraper.core.scraping.state import ScrapeRun, ScrapeState
from profilescraper.db.models import Business, SelectorConfig
from profilescraper.utils.exceptions import FaqNavigationError, HomeNavigationError
from profilescraper.utils.retry import with_retry

logger = structlog.get_logger(__name__)

# Called with a business_id keyword; returns a fresh session per run
BrowserSessionFactory = Callable[..., AbstractAsyncContextManager[PageQuery]]

T = TypeVar("T")


def _or_default(value: T | None, default: T) -> T:
    return default if value is None else value


class ExtractionPipeline:
    """
    Scrape one business's website into a ``ScrapeResult``.

    The run has two failure domains:
    1. Home page: services and contact details. If it cannot be loaded after
       all retries the whole run fails with ``HomeNavigationError``.
    2. FAQ page (``{website_url}/faq``): if it cannot be loaded, or the
       scrape deadline runs out while reading it, the run continues with an
       empty FAQ list.

    The deadline never shortens the home page retries; it only bounds the
    time left for the FAQ page.

    Steps are strictly sequential and share one browser page, which is
    released before ``run`` returns or raises.
    """

    def __init__(
        self,
        browser_factory: BrowserSessionFactory = BrowserSessionManager,
        retry_attempts: int | None = None,
        retry_delay_ms: int | None = None,
        navigation_timeout_ms: int | None = None,
        settle_delay_ms: int | None = None,
        faq_path: str | None = None,
        max_services: int | None = None,
        max_faqs: int | None = None,
        contact_fallback_selectors: bool | None = None,
    ) -> None:
        """
        Initialize extraction pipeline.

        Every argument left as None falls back to the matching setting.

        Args:
            browser_factory: Callable returning a fresh browser session per run
            retry_attempts: Navigation attempts per page
            retry_delay_ms: Delay between navigation attempts
            navigation_timeout_ms: Bound on each navigation attempt (0 disables)
            settle_delay_ms: Wait after each page load
            faq_path: Path of the FAQ page relative to the website URL
            max_services: Cap on services kept (0 keeps all)
            max_faqs: Cap on FAQ pairs kept (0 keeps all)
            contact_fallback_selectors: Try common tel:/mailto: selectors too
        """
        self.browser_factory = browser_factory
        self.retry_attempts = _or_default(retry_attempts, settings.retry_attempts)
        self.retry_delay_ms = _or_default(retry_delay_ms, settings.retry_delay_ms)
        self.navigation_timeout_ms = _or_default(
            navigation_timeout_ms, settings.navigation_timeout_ms
        )
        self.settle_delay_ms = _or_default(settle_delay_ms, settings.settle_delay_ms)
        self.faq_path = _or_default(faq_path, settings.faq_path)
        self.max_services = _or_default(max_services, settings.max_services)
        self.max_faqs = _or_default(max_faqs, settings.max_faqs)
        self.contact_fallback_selectors = _or_default(
            contact_fallback_selectors, settings.contact_fallback_selectors
        )

    def faq_url(self, website_url: str) -> str:
        """Build the FAQ page URL from the home page URL."""
        return website_url.rstrip("/") + self.faq_path

    async def run(
        self,
        business: Business,
        selectors: SelectorConfig,
        run: ScrapeRun | None = None,
        deadline: float | None = None,
    ) -> ScrapeResult:
        """
        Scrape services, contact details and FAQs for a business.

        Args:
            business: Business record with a website URL
            selectors: Selector configuration for the business
            run: Run tracker in the CONFIG_LOADED state (created if omitted)
            deadline: Event loop time by which the FAQ step must finish
                (None for no limit)

        Returns:
            ScrapeResult with services, contact and FAQs

        Raises:
            BrowserLaunchError: If the browser cannot be started
            HomeNavigationError: If the home page cannot be loaded
        """
        if run is None:
            run = ScrapeRun(business_id=business.business_id)
            run.advance(ScrapeState.CONFIG_LOADED)

        home_url = business.website_url or ""
        log = logger.bind(business_id=business.business_id)

        async with self.browser_factory(business_id=business.business_id) as page:
            run.advance(ScrapeState.BROWSER_ACQUIRED)

            services, contact = await self._extract_home(page, business, selectors)
            run.advance(ScrapeState.HOME_EXTRACTED)

            faqs = await self._extract_faqs(page, business, selectors, deadline)
            run.advance(ScrapeState.FAQ_ATTEMPTED)

        result = ScrapeResult(services=services, contact=contact, faqs=faqs)
        log.info(
            "extraction_completed",
            url=home_url,
            services=len(result.services),
            phone_found=contact.phone != NOT_FOUND,
            email_found=contact.email != NOT_FOUND,
            faqs=len(result.faqs),
        )
        return result

    async def _navigate(self, page: PageQuery, url: str) -> None:
        """Load a page under the retry policy, then let it settle."""
        attempt_timeout = (
            self.navigation_timeout_ms / 1000 if self.navigation_timeout_ms else None
        )
        await with_retry(
            lambda: page.goto(url),
            max_attempts=self.retry_attempts,
            delay=self.retry_delay_ms / 1000,
            attempt_timeout=attempt_timeout,
            name=f"goto {url}",
        )
        if self.settle_delay_ms:
            await asyncio.sleep(self.settle_delay_ms / 1000)

    async def _extract_home(
        self, page: PageQuery, business: Business, selectors: SelectorConfig
    ) -> tuple[list[ExtractedService], ExtractedContact]:
        home_url = business.website_url or ""
        logger.info("home_page_visit", business_id=business.business_id, url=home_url)

        try:
            await self._navigate(page, home_url)
        except Exception as e:
            logger.error(
                "home_navigation_failed",
                business_id=business.business_id,
                url=home_url,
                attempts=self.retry_attempts,
                error=str(e) or type(e).__name__,
            )
            raise HomeNavigationError(business.business_id, home_url) from e

        raw_services = await page.query_text(selectors.service_selector)
        services = filter_services(raw_services, limit=self.max_services)
        logger.info(
            "services_extracted",
            business_id=business.business_id,
            selector=selectors.service_selector,
            raw=len(raw_services),
            kept=len(services),
        )

        phone = await self._extract_contact_field(
            page, selectors.phone_selector, PHONE_FALLBACK_SELECTORS, "tel:"
        )
        email = await self._extract_contact_field(
            page, selectors.email_selector, EMAIL_FALLBACK_SELECTORS, "mailto:"
        )
        contact = build_contact(phone, email)
        logger.info(
            "contact_extracted",
            business_id=business.business_id,
            phone=contact.phone,
            email=contact.email,
        )
        return services, contact

    async def _extract_contact_field(
        self,
        page: PageQuery,
        configured: str | None,
        fallbacks: tuple[str, ...],
        scheme: str,
    ) -> str | None:
        """Try the configured selector, then the fallbacks, until one yields a value."""
        candidates = [configured] if configured else []
        if self.contact_fallback_selectors:
            candidates.extend(fallbacks)

        for selector in candidates:
            texts = await page.query_text(selector)
            if not texts:
                continue
            hrefs = [] if texts[0] else await page.query_attribute(selector, "href")
            value = contact_value(texts, hrefs, scheme)
            if value:
                return value
        return None

    async def _extract_faqs(
        self,
        page: PageQuery,
        business: Business,
        selectors: SelectorConfig,
        deadline: float | None,
    ) -> list[ExtractedFAQ]:
        if not selectors.has_faq_selectors:
            logger.info("faq_selectors_missing", business_id=business.business_id)
            return []

        faq_url = self.faq_url(business.website_url or "")
        try:
            return await self._read_faq_page(page, business, selectors, faq_url, deadline)
        except FaqNavigationError as e:
            logger.warning(
                "faq_page_skipped",
                business_id=business.business_id,
                url=faq_url,
                error=str(e),
                cause=repr(e.__cause__) if e.__cause__ else None,
            )
            return []

    async def _read_faq_page(
        self,
        page: PageQuery,
        business: Business,
        selectors: SelectorConfig,
        url: str,
        deadline: float | None,
    ) -> list[ExtractedFAQ]:
        """
        Load the FAQ page and pair its questions with answers.

        Raises:
            FaqNavigationError: If the page cannot be loaded, or the deadline
                passes before it has been read
        """
        remaining = None
        if deadline is not None:
            remaining = deadline - asyncio.get_running_loop().time()
            if remaining <= 0:
                raise FaqNavigationError(business.business_id, url, "scrape deadline reached")

        try:
            return await asyncio.wait_for(
                self._scrape_faq_page(page, business, selectors, url), timeout=remaining
            )
        except asyncio.TimeoutError as e:
            raise FaqNavigationError(
                business.business_id, url, "scrape deadline reached"
            ) from e

    async def _scrape_faq_page(
        self, page: PageQuery, business: Business, selectors: SelectorConfig, url: str
    ) -> list[ExtractedFAQ]:
        logger.info("faq_page_visit", business_id=business.business_id, url=url)
        try:
            await self._navigate(page, url)
        except Exception as e:
            raise FaqNavigationError(business.business_id, url) from e

        questions, answers = await asyncio.gather(
            page.query_text(selectors.faq_question_selector),  # type: ignore[arg-type]
            page.query_text(selectors.faq_answer_selector),  # type: ignore[arg-type]
        )
        faqs = pair_faqs(questions, answers, limit=self.max_faqs)
        logger.info(
            "faqs_extracted",
            business_id=business.business_id,
            questions=len(questions),
            answers=len(answers),
            kept=len(faqs),
        )
        return faqs
