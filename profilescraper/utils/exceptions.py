"""Custom exceptions for the profile scraper."""


class ProfileScraperError(Exception):
    """Base exception for all profile scraper errors.

    Every error raised while scraping carries the business id it belongs to.
    """

    def __init__(self, message: str, business_id: str | None = None) -> None:
        super().__init__(message)
        self.business_id = business_id


class ConfigMissingError(ProfileScraperError):
    """Exception raised when the business record or its selector config is absent."""

    def __init__(self, business_id: str, missing: str) -> None:
        super().__init__(f"{missing} for {business_id} not found", business_id)
        self.missing = missing


class BrowserLaunchError(ProfileScraperError):
    """Exception raised when the browser process cannot be started."""

    pass


class NavigationError(ProfileScraperError):
    """Exception raised when a page responds with an error status."""

    def __init__(
        self, url: str, status: int | None = None, business_id: str | None = None
    ) -> None:
        detail = f"HTTP {status}" if status is not None else "no response"
        super().__init__(f"Navigation to {url} failed: {detail}", business_id)
        self.url = url
        self.status = status


class HomeNavigationError(ProfileScraperError):
    """Exception raised when the home page stays unreachable after all retries."""

    def __init__(self, business_id: str, url: str) -> None:
        super().__init__(f"Home page {url} unreachable", business_id)
        self.url = url


class FaqNavigationError(ProfileScraperError):
    """Exception raised when the FAQ page cannot be loaded.

    Never escapes the pipeline: it degrades to an empty FAQ list.
    """

    def __init__(self, business_id: str, url: str, reason: str | None = None) -> None:
        message = f"FAQ page {url} unreachable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, business_id)
        self.url = url
        self.reason = reason


class PersistenceError(ProfileScraperError):
    """Exception raised when a scraped entity cannot be saved."""

    def __init__(self, business_id: str, entity: str, reason: str) -> None:
        super().__init__(f"Saving {entity} for {business_id} failed: {reason}", business_id)
        self.entity = entity


class InvalidStateTransition(ProfileScraperError):
    """Exception raised when a scrape run moves between incompatible states."""

    pass
