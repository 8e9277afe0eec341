"""Profile scraper - bootstrap business profiles from their public websites."""

from profilescraper.version import __version__

__all__ = ["__version__"]
