"""Business repository for database operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from profilescraper.db.models.business import Business
from profilescraper.db.repositories.base_repository import BaseRepository


class BusinessRepository(BaseRepository[Business]):
    """Repository for Business model operations."""

    def __init__(self, session: AsyncSession):
        """Initialize business repository."""
        super().__init__(Business, session)

    async def ensure_stub(self, business_id: str) -> Business:
        """
        Return the business record, creating a bare stub if it is absent.

        Existing records are left untouched.

        Args:
            business_id: External business id

        Returns:
            Existing or newly created Business instance
        """
        business = await self.get_by_business_id(business_id)
        if business is not None:
            return business
        return await self.create(Business(business_id=business_id))
