"""Field extraction rules applied to raw text pulled from pages.

These functions are pure: they take what the page query returned and turn it
into result types. Nothing here touches the browser.
"""

import re

from profilescraper.core.scraping.results import (
    NO_ANSWER,
    NOT_FOUND,
    ExtractedContact,
    ExtractedFAQ,
    ExtractedService,
)

MIN_SERVICE_LENGTH = 4

# Navigation and staff headings that share markup with service names
SERVICE_DENYLIST = re.compile(
    r"Doctor|Meet|Our Team|Reviews|Testimonials|News|About|Specialist|Physician|Surgeon|Contact",
    re.IGNORECASE,
)
# Case-sensitive: catches "Dr." and "Dr " prefixes on staff names
DOCTOR_MARKER = "Dr"

PHONE_FALLBACK_SELECTORS = (
    'a[href^="tel:"]',
    ".phone",
    ".contact-phone",
    '[class*="phone"]',
    '[id*="phone"]',
)
EMAIL_FALLBACK_SELECTORS = (
    'a[href^="mailto:"]',
    ".email",
    ".contact-email",
    '[class*="email"]',
    '[id*="email"]',
)


def is_service_candidate(text: str) -> bool:
    """Check whether a piece of text looks like a service name."""
    return (
        len(text) >= MIN_SERVICE_LENGTH
        and DOCTOR_MARKER not in text
        and not SERVICE_DENYLIST.search(text)
    )


def filter_services(raw: list[str], limit: int | None = None) -> list[ExtractedService]:
    """
    Turn raw service text nodes into the service list.

    Args:
        raw: Text of every node matched by the service selector
        limit: Keep at most this many services (None or 0 keeps all)

    Returns:
        Services in page order
    """
    names = [text.strip() for text in raw]
    services = [ExtractedService(name=name) for name in names if is_service_candidate(name)]
    if limit:
        services = services[:limit]
    return services


def contact_value(texts: list[str], hrefs: list[str], scheme: str) -> str | None:
    """
    Pick a contact value from one selector's matches.

    The first element's text wins; an element with no text falls back to its
    link target with the ``tel:``/``mailto:`` scheme removed.

    Args:
        texts: Text content of the matched elements
        hrefs: ``href`` attributes of the matched elements
        scheme: Link scheme to strip, e.g. ``"tel:"``

    Returns:
        The value, or None if the selector yielded nothing usable
    """
    if texts and texts[0].strip():
        return texts[0].strip()
    if hrefs and hrefs[0]:
        value = hrefs[0].strip()
        if value.lower().startswith(scheme):
            value = value[len(scheme):]
        # Drop query strings such as mailto:a@b.com?subject=Hi
        value = value.split("?", 1)[0].strip()
        return value or None
    return None


def build_contact(phone: str | None, email: str | None) -> ExtractedContact:
    """Build the contact record, substituting sentinels for missing values."""
    return ExtractedContact(phone=phone or NOT_FOUND, email=email or NOT_FOUND)


def pair_faqs(
    questions: list[str], answers: list[str], limit: int | None = None
) -> list[ExtractedFAQ]:
    """
    Pair FAQ questions with answers by position.

    A question without a (non-empty) answer at the same index gets the
    ``"No answer found"`` sentinel; surplus answers are dropped.

    Args:
        questions: Question texts in page order
        answers: Answer texts in page order
        limit: Keep at most this many pairs (None or 0 keeps all)

    Returns:
        One FAQ per question
    """
    faqs = []
    for index, question in enumerate(questions):
        answer = answers[index].strip() if index < len(answers) else ""
        faqs.append(ExtractedFAQ(question=question.strip(), answer=answer or NO_ANSWER))
    if limit:
        faqs = faqs[:limit]
    return faqs
