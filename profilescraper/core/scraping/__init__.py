"""Website scraping for business profiles.

This module provides:
- Browser session lifecycle (one Chromium process per run)
- Selector-driven extraction of services, contact details and FAQs
- Bounded retries around page navigation
- Persistence of the scraped profile and advisory data quality checks
"""

from profilescraper.core.scraping.browser_session import BrowserSessionManager
from profilescraper.core.scraping.controller import (
    OutcomeStatus,
    ScrapeController,
    ScrapeGuard,
    ScrapeOutcome,
)
from profilescraper.core.scraping.page_query import PageQuery, PlaywrightPageQuery
from profilescraper.core.scraping.persistence import PersistenceAdapter, PersistenceReport
from profilescraper.core.scraping.pipeline import ExtractionPipeline
from profilescraper.core.scraping.results import (
    ExtractedContact,
    ExtractedFAQ,
    ExtractedService,
    ScrapeResult,
)
from profilescraper.core.scraping.state import ScrapeRun, ScrapeState
from profilescraper.core.scraping.validation import (
    DataQualityReport,
    assess_quality,
    has_services,
    is_valid_email,
    is_valid_phone,
)

__all__ = [
    "BrowserSessionManager",
    "PageQuery",
    "PlaywrightPageQuery",
    "ExtractionPipeline",
    "ScrapeController",
    "ScrapeGuard",
    "ScrapeOutcome",
    "OutcomeStatus",
    "PersistenceAdapter",
    "PersistenceReport",
    "ScrapeResult",
    "ExtractedService",
    "ExtractedContact",
    "ExtractedFAQ",
    "ScrapeRun",
    "ScrapeState",
    "DataQualityReport",
    "assess_quality",
    "has_services",
    "is_valid_email",
    "is_valid_phone",
]
