"""Database models for the profile scraper."""

from profilescraper.db.models.business import Business
from profilescraper.db.models.profile import Contact, FaqCollection, ServiceCatalog
from profilescraper.db.models.selector_config import SelectorConfig

__all__ = [
    "Business",
    "SelectorConfig",
    "ServiceCatalog",
    "Contact",
    "FaqCollection",
]
