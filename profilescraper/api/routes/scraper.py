"""Scraper trigger endpoint."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, status

from profilescraper.api.dependencies import get_scrape_controller
from profilescraper.api.schemas.scraper import ScrapeResponse
from profilescraper.api.security import verify_api_key
from profilescraper.core.scraping.controller import OutcomeStatus, ScrapeController

logger = structlog.get_logger(__name__)
router = APIRouter(
    prefix="/scraper",
    tags=["scraper"],
    dependencies=[Depends(verify_api_key)],
)


@router.get(
    "/{business_id}",
    response_model=ScrapeResponse,
    summary="Scrape business website",
    description="Scrape the business's website and replace its stored profile",
    status_code=status.HTTP_200_OK,
)
async def scrape_business(
    business_id: str = Path(..., min_length=1, max_length=128, description="Business id"),
    controller: ScrapeController = Depends(get_scrape_controller),  # noqa: B008
) -> ScrapeResponse:
    """
    Run a scrape for one business and wait for it to finish.

    Args:
        business_id: External business id
        controller: Scrape controller (injected)

    Returns:
        ScrapeResponse acknowledging the completed scrape

    Raises:
        HTTPException: 404 if configuration is missing, 409 if a scrape is
            already running, 500 if the scrape or saving its data failed
    """
    business_id = business_id.strip()
    logger.info("scrape_request", business_id=business_id)

    outcome = await controller.scrape(business_id)

    if outcome.status is OutcomeStatus.CONFIG_MISSING:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=outcome.message)
    if outcome.status is OutcomeStatus.ALREADY_RUNNING:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=outcome.message)
    if outcome.status is OutcomeStatus.PARTIALLY_PERSISTED:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": outcome.message,
                "failed_entities": outcome.persistence.failed_entities
                if outcome.persistence
                else [],
            },
        )
    if outcome.status is not OutcomeStatus.COMPLETED or outcome.result is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    return ScrapeResponse(
        message=outcome.message,
        status=outcome.status.value,
        business_id=business_id,
        services=len(outcome.result.services),
        faqs=len(outcome.result.faqs),
    )
