"""FastAPI application for the profile scraper API."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from profilescraper.api.middleware import RequestLoggingMiddleware
from profilescraper.api.routes import api_v1_router, health
from profilescraper.config import settings
from profilescraper.db.session import close_db
from profilescraper.utils.exceptions import ProfileScraperError
from profilescraper.utils.logging import configure_logging
from profilescraper.version import __version__

configure_logging(log_level=settings.log_level, environment=settings.environment)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan events."""
    logger.info("application_startup", version=__version__)
    yield
    await close_db()
    logger.info("application_shutdown")


app = FastAPI(
    title="Profile Scraper API",
    description="Bootstrap business profiles by scraping their public websites",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)  # Health check (no version prefix)
app.include_router(api_v1_router)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors with appropriate logging and response."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error("database_error", error=str(exc), request_id=request_id)
    return JSONResponse(status_code=500, content={"detail": "Database error occurred"})


@app.exception_handler(ProfileScraperError)
async def scraper_exception_handler(
    request: Request, exc: ProfileScraperError
) -> JSONResponse:
    """Handle scraper errors that escape a route; details stay in the logs."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error(
        "scraper_error",
        error_type=type(exc).__name__,
        error=str(exc),
        business_id=exc.business_id,
        request_id=request_id,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors."""
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error("unhandled_exception", error=str(exc), request_id=request_id)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
