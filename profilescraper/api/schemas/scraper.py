"""Pydantic schemas for the scraper trigger endpoint."""

from pydantic import BaseModel


class ScrapeResponse(BaseModel):
    """Acknowledgement returned once a scrape has finished."""

    message: str
    status: str
    business_id: str
    services: int
    faqs: int

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "message": "Scraping completed for Bright Smile Dental",
                    "status": "completed",
                    "business_id": "bright-smile",
                    "services": 8,
                    "faqs": 5,
                }
            ]
        }
    }
