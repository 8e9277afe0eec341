"""API route initialization and versioning."""

from fastapi import APIRouter

from profilescraper.api.routes import scraper

# API v1 router - all versioned endpoints go under /api/v1
api_v1_router = APIRouter(prefix="/api/v1")

api_v1_router.include_router(scraper.router)
