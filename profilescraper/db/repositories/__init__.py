"""Database repositories for the profile scraper."""

from profilescraper.db.repositories.base_repository import BaseRepository
from profilescraper.db.repositories.business_repository import BusinessRepository
from profilescraper.db.repositories.profile_repository import (
    ContactRepository,
    FaqCollectionRepository,
    ServiceCatalogRepository,
)
from profilescraper.db.repositories.selector_repository import SelectorRepository

__all__ = [
    "BaseRepository",
    "BusinessRepository",
    "SelectorRepository",
    "ServiceCatalogRepository",
    "ContactRepository",
    "FaqCollectionRepository",
]
