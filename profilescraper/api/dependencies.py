"""FastAPI dependencies for route handlers."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from profilescraper.core.scraping.controller import ScrapeController
from profilescraper.db.session import get_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide async database session to route handlers.

    Yields:
        AsyncSession: Database session for the request
    """
    async for session in get_session():
        yield session


def get_scrape_controller() -> ScrapeController:
    """
    Provide a scrape controller to route handlers.

    Each request gets its own controller; browser sessions are created per
    scrape and never shared.
    """
    return ScrapeController()
