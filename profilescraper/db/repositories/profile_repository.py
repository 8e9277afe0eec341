"""Repositories for the scraped profile tables.

Every ``replace_*`` method overwrites the business's single row wholesale,
inserting it when the business has none yet.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from profilescraper.db.models.profile import Contact, FaqCollection, ServiceCatalog
from profilescraper.db.repositories.base_repository import BaseRepository


class ServiceCatalogRepository(BaseRepository[ServiceCatalog]):
    """Repository for ServiceCatalog model operations."""

    def __init__(self, session: AsyncSession):
        """Initialize service catalog repository."""
        super().__init__(ServiceCatalog, session)

    async def replace_services(
        self, business_id: str, services: list[dict[str, str]]
    ) -> ServiceCatalog:
        """
        Replace the service list of a business.

        Args:
            business_id: External business id
            services: Service entries as ``{"name": ...}`` dicts

        Returns:
            Stored ServiceCatalog instance
        """
        return await self.replace(business_id, services=services)


class ContactRepository(BaseRepository[Contact]):
    """Repository for Contact model operations."""

    def __init__(self, session: AsyncSession):
        """Initialize contact repository."""
        super().__init__(Contact, session)

    async def replace_contact(self, business_id: str, phone: str, email: str) -> Contact:
        """Replace the phone and email of a business (sentinels included)."""
        return await self.replace(business_id, phone=phone, email=email)


class FaqCollectionRepository(BaseRepository[FaqCollection]):
    """Repository for FaqCollection model operations."""

    def __init__(self, session: AsyncSession):
        """Initialize FAQ collection repository."""
        super().__init__(FaqCollection, session)

    async def replace_faqs(
        self, business_id: str, faqs: list[dict[str, str]]
    ) -> FaqCollection:
        """
        Replace the FAQ list of a business.

        Args:
            business_id: External business id
            faqs: FAQ entries as ``{"question": ..., "answer": ...}`` dicts

        Returns:
            Stored FaqCollection instance
        """
        return await self.replace(business_id, faqs=faqs)
