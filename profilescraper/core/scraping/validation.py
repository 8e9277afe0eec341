"""Advisory data quality checks for scraped profiles.

Nothing in the scrape pipeline calls these; low-quality data is still saved.
They exist so reporting tools can flag profiles that need a human look.
"""

import re
from dataclasses import dataclass, field

from profilescraper.core.scraping.results import ScrapeResult

MIN_PHONE_DIGITS = 7

_PHONE_RUN = re.compile(r"[\d\s+\-().]+")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_phone(value: str | None) -> bool:
    """Check for a run of digits and phone punctuation holding at least 7 digits."""
    if not value:
        return False
    return any(
        sum(char.isdigit() for char in run) >= MIN_PHONE_DIGITS
        for run in _PHONE_RUN.findall(value)
    )


def is_valid_email(value: str | None) -> bool:
    """Check the value looks like ``local@domain.tld``."""
    if not value:
        return False
    return _EMAIL.match(value.strip()) is not None


def has_services(services: list | None) -> bool:
    """Check a service list is non-empty."""
    return isinstance(services, list) and len(services) > 0


@dataclass
class DataQualityReport:
    """Outcome of running every check over one scrape result."""

    valid_phone: bool
    valid_email: bool
    has_services: bool
    faq_count: int
    issues: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


def assess_quality(result: ScrapeResult) -> DataQualityReport:
    """
    Run the advisory checks over a scrape result.

    Args:
        result: Scraped (or stored) profile data

    Returns:
        DataQualityReport listing each failed check as an issue
    """
    report = DataQualityReport(
        valid_phone=is_valid_phone(result.contact.phone),
        valid_email=is_valid_email(result.contact.email),
        has_services=has_services(result.services),
        faq_count=len(result.faqs),
    )
    if not report.has_services:
        report.issues.append("No services extracted")
    if not report.valid_phone:
        report.issues.append(f"Phone does not look valid: {result.contact.phone!r}")
    if not report.valid_email:
        report.issues.append(f"Email does not look valid: {result.contact.email!r}")
    return report
