"""Scrape controller: single entry point for scraping one business."""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from profilescraper.config import settings
from profilescraper.core.scraping.persistence import PersistenceAdapter, PersistenceReport
from profilescraper.core.scraping.pipeline import ExtractionPipeline
from profilescraper.core.scraping.results import ScrapeResult
from profilescraper.core.scraping.state import ScrapeRun, ScrapeState
from profilescraper.db.models import Business, SelectorConfig
from profilescraper.db.repositories import BusinessRepository, SelectorRepository
from profilescraper.db.session import AsyncSessionLocal
from profilescraper.utils.exceptions import ConfigMissingError
from profilescraper.utils.logging import scrape_log_context

logger = structlog.get_logger(__name__)


class OutcomeStatus(str, Enum):
    """How a scrape request ended."""

    COMPLETED = "completed"
    PARTIALLY_PERSISTED = "partially_persisted"
    CONFIG_MISSING = "config_missing"
    ALREADY_RUNNING = "already_running"
    FAILED = "failed"


@dataclass
class ScrapeOutcome:
    """Result handed back to whoever triggered the scrape.

    ``message`` is safe to show to end users; failure details stay in logs.
    """

    business_id: str
    status: OutcomeStatus
    message: str
    business_name: str | None = None
    result: ScrapeResult | None = None
    persistence: PersistenceReport | None = None
    run: ScrapeRun | None = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.COMPLETED


class ScrapeGuard:
    """Track which businesses have a scrape in flight in this process."""

    def __init__(self) -> None:
        self._active: set[str] = set()

    def claim(self, business_id: str) -> bool:
        """Reserve a business id; False if a scrape for it is already running."""
        if business_id in self._active:
            return False
        self._active.add(business_id)
        return True

    def release(self, business_id: str) -> None:
        self._active.discard(business_id)

    def is_running(self, business_id: str) -> bool:
        return business_id in self._active

    @property
    def active_count(self) -> int:
        return len(self._active)


# Shared by every controller in the process
scrape_guard = ScrapeGuard()


class ScrapeController:
    """
    Load a business's configuration, scrape its website and save the profile.

    Configuration problems are detected before any browser is launched.
    Errors during extraction (browser launch or an unreachable home page)
    abort the run before anything is written, so a previously good profile
    is never partially overwritten. The scrape deadline only limits how long
    the FAQ page may take once the home page is done; running out of it
    leaves the FAQ list empty rather than failing the run.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
        pipeline: ExtractionPipeline | None = None,
        persistence: PersistenceAdapter | None = None,
        guard: ScrapeGuard | None = None,
        scrape_timeout_ms: int | None = None,
    ) -> None:
        """
        Initialize scrape controller.

        Args:
            session_factory: Factory for sessions used to load configuration
            pipeline: Extraction pipeline (default built from settings)
            persistence: Persistence adapter (default uses ``session_factory``)
            guard: Per-business exclusion guard (default is process-wide)
            scrape_timeout_ms: Budget for one scrape; the FAQ page gets what
                the home page leaves of it, 0 disables (defaults to settings)
        """
        self.session_factory = session_factory
        self.pipeline = pipeline or ExtractionPipeline()
        self.persistence = persistence or PersistenceAdapter(session_factory)
        self.guard = guard or scrape_guard
        self.scrape_timeout_ms = (
            settings.scrape_timeout_ms if scrape_timeout_ms is None else scrape_timeout_ms
        )

    async def scrape(self, business_id: str) -> ScrapeOutcome:
        """
        Scrape and persist the profile of one business.

        Args:
            business_id: External business id

        Returns:
            ScrapeOutcome describing how the run ended
        """
        if not self.guard.claim(business_id):
            logger.warning("scrape_already_running", business_id=business_id)
            return ScrapeOutcome(
                business_id=business_id,
                status=OutcomeStatus.ALREADY_RUNNING,
                message=f"A scrape for {business_id} is already in progress",
            )

        try:
            with scrape_log_context(business_id):
                return await self._scrape(business_id)
        finally:
            self.guard.release(business_id)

    async def load_config(self, business_id: str) -> tuple[Business, SelectorConfig]:
        """
        Load the business record and its selector configuration.

        Args:
            business_id: External business id

        Returns:
            Tuple of (Business, SelectorConfig)

        Raises:
            ConfigMissingError: If either record is absent or incomplete
        """
        async with self.session_factory() as session:
            business = await BusinessRepository(session).get_by_business_id(business_id)
            if business is None or not business.website_url:
                raise ConfigMissingError(business_id, "Business")

            selectors = await SelectorRepository(session).get_by_business_id(business_id)
            if selectors is None or not (selectors.service_selector or "").strip():
                raise ConfigMissingError(business_id, "Selectors")

        return business, selectors

    async def _scrape(self, business_id: str) -> ScrapeOutcome:
        run = ScrapeRun(business_id=business_id)
        started = time.monotonic()
        log = logger.bind(business_id=business_id)

        try:
            business, selectors = await self.load_config(business_id)
        except ConfigMissingError as e:
            run.advance(ScrapeState.CONFIG_LOADED)
            run.fail(str(e))
            log.warning("scrape_config_missing", missing=e.missing)
            return ScrapeOutcome(
                business_id=business_id,
                status=OutcomeStatus.CONFIG_MISSING,
                message=str(e),
                run=run,
            )
        except Exception as e:
            return self._failed(run, e, started)

        run.advance(ScrapeState.CONFIG_LOADED)
        log.info("scrape_started", business_name=business.business_name, url=business.website_url)

        try:
            result = await self._extract(business, selectors, run)
        except Exception as e:
            return self._failed(run, e, started, url=business.website_url)

        report = await self.persistence.save(business_id, result)
        run.advance(ScrapeState.PERSISTED)
        run.advance(ScrapeState.DONE)

        duration_ms = round((time.monotonic() - started) * 1000)
        if report.ok:
            log.info("scrape_completed", duration_ms=duration_ms)
            return ScrapeOutcome(
                business_id=business_id,
                status=OutcomeStatus.COMPLETED,
                message=f"Scraping completed for {business.business_name or business_id}",
                business_name=business.business_name,
                result=result,
                persistence=report,
                run=run,
            )

        log.warning(
            "scrape_completed_with_errors",
            duration_ms=duration_ms,
            failed=report.failed_entities,
        )
        return ScrapeOutcome(
            business_id=business_id,
            status=OutcomeStatus.PARTIALLY_PERSISTED,
            message="Scrape finished but some profile data could not be saved",
            business_name=business.business_name,
            result=result,
            persistence=report,
            run=run,
        )

    async def _extract(
        self, business: Business, selectors: SelectorConfig, run: ScrapeRun
    ) -> ScrapeResult:
        """Run the pipeline, giving the FAQ step whatever remains of the deadline."""
        deadline = None
        if self.scrape_timeout_ms:
            deadline = asyncio.get_running_loop().time() + self.scrape_timeout_ms / 1000
        return await self.pipeline.run(business, selectors, run, deadline=deadline)

    def _failed(
        self,
        run: ScrapeRun,
        error: Exception,
        started: float,
        url: str | None = None,
    ) -> ScrapeOutcome:
        reason = str(error) or type(error).__name__
        failed_in = run.state.value
        run.fail(reason)
        logger.error(
            "scrape_failed",
            business_id=run.business_id,
            url=url,
            state=failed_in,
            error_type=type(error).__name__,
            error=reason,
            duration_ms=round((time.monotonic() - started) * 1000),
            exc_info=error,
        )
        return ScrapeOutcome(
            business_id=run.business_id,
            status=OutcomeStatus.FAILED,
            message="Scrape failed",
            run=run,
        )
