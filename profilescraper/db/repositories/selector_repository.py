"""Selector configuration repository (read-only)."""

from sqlalchemy.ext.asyncio import AsyncSession

from profilescraper.db.models.selector_config import SelectorConfig
from profilescraper.db.repositories.base_repository import BaseRepository


class SelectorRepository(BaseRepository[SelectorConfig]):
    """Repository for SelectorConfig lookups."""

    def __init__(self, session: AsyncSession):
        """Initialize selector repository."""
        super().__init__(SelectorConfig, session)
