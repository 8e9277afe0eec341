"""Persistence adapter: store a scrape result as the business's profile."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from profilescraper.core.scraping.results import ScrapeResult
from profilescraper.db.repositories import (
    BusinessRepository,
    ContactRepository,
    FaqCollectionRepository,
    ServiceCatalogRepository,
)
from profilescraper.db.session import AsyncSessionLocal
from profilescraper.utils.exceptions import PersistenceError

logger = structlog.get_logger(__name__)

ENTITY_BUSINESS = "business"
ENTITY_SERVICES = "services"
ENTITY_CONTACT = "contact"
ENTITY_FAQS = "faqs"


@dataclass
class PersistenceReport:
    """Aggregate outcome of the four upserts for one business."""

    business_id: str
    saved: list[str] = field(default_factory=list)
    errors: list[PersistenceError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def failed_entities(self) -> list[str]:
        return [error.entity for error in self.errors]


class PersistenceAdapter:
    """
    Save scrape results with one independent upsert per entity.

    Each upsert runs in its own session and transaction, so a failure saving
    one entity neither blocks nor rolls back the others. Service, contact and
    FAQ rows are replaced wholesale.
    """

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal
    ) -> None:
        """
        Initialize persistence adapter.

        Args:
            session_factory: Factory producing a fresh session per upsert
        """
        self.session_factory = session_factory

    async def save(self, business_id: str, result: ScrapeResult) -> PersistenceReport:
        """
        Persist a scrape result.

        Args:
            business_id: External business id
            result: Extracted profile data

        Returns:
            PersistenceReport listing saved entities and per-entity errors
        """
        report = PersistenceReport(business_id=business_id)
        services = [service.to_dict() for service in result.services]
        contact = result.contact
        faqs = [faq.to_dict() for faq in result.faqs]

        upserts: list[tuple[str, Callable[[AsyncSession], Awaitable[object]]]] = [
            (
                ENTITY_BUSINESS,
                lambda session: BusinessRepository(session).ensure_stub(business_id),
            ),
            (
                ENTITY_SERVICES,
                lambda session: ServiceCatalogRepository(session).replace_services(
                    business_id, services
                ),
            ),
            (
                ENTITY_CONTACT,
                lambda session: ContactRepository(session).replace_contact(
                    business_id, contact.phone, contact.email
                ),
            ),
            (
                ENTITY_FAQS,
                lambda session: FaqCollectionRepository(session).replace_faqs(
                    business_id, faqs
                ),
            ),
        ]

        for entity, upsert in upserts:
            try:
                async with self.session_factory() as session:
                    await upsert(session)
                    await session.commit()
                report.saved.append(entity)
            except Exception as e:
                logger.error(
                    "profile_upsert_failed",
                    business_id=business_id,
                    entity=entity,
                    error=str(e),
                    exc_info=True,
                )
                report.errors.append(PersistenceError(business_id, entity, str(e)))

        if report.ok:
            logger.info(
                "profile_saved",
                business_id=business_id,
                services=len(services),
                faqs=len(faqs),
            )
        else:
            logger.warning(
                "profile_partially_saved",
                business_id=business_id,
                saved=report.saved,
                failed=report.failed_entities,
            )
        return report
