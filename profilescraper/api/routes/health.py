"""Liveness endpoint reporting database reachability and scrapes in flight."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from profilescraper.api.dependencies import get_db
from profilescraper.core.scraping.controller import scrape_guard
from profilescraper.version import __version__

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:  # noqa: B008
    """
    Report whether the profile database answers.

    ``active_scrapes`` counts businesses being scraped by this process.

    Raises:
        HTTPException: 503 if the database cannot be queried
    """
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        raise HTTPException(status_code=503, detail="Profile database unavailable") from e

    return {
        "status": "healthy",
        "database": "connected",
        "active_scrapes": scrape_guard.active_count,
        "version": __version__,
    }
