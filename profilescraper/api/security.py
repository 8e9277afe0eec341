"""API key check for the scrape trigger endpoints.

Callers are trusted services behind the gateway, so a single shared key is
enough; which businesses a caller may scrape is decided by the gateway.
"""

import secrets

import structlog
from fastapi import Header, HTTPException, status

from profilescraper.config import settings

logger = structlog.get_logger(__name__)

API_KEY_HEADER = "X-API-Key"


def _unauthorized(reason: str, detail: str) -> HTTPException:
    logger.warning("api_key_rejected", reason=reason)
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def verify_api_key(
    x_api_key: str | None = Header(None, description="Shared key of the calling service"),
) -> None:
    """
    Reject scrape requests that do not carry the configured API key.

    Skipped entirely when REQUIRE_API_KEY is false (local development).

    Raises:
        HTTPException: 401 for a missing or wrong key, 500 if no key is configured
    """
    if not settings.require_api_key:
        return

    if not x_api_key:
        raise _unauthorized("missing", f"Missing {API_KEY_HEADER} header")

    if settings.api_key is None:
        logger.error("api_key_not_configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Scrape API authentication is not configured",
        )

    if not secrets.compare_digest(
        x_api_key.encode(), settings.api_key.get_secret_value().encode()
    ):
        raise _unauthorized("mismatch", "Invalid API key")
