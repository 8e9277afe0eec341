"""Pytest configuration and fixtures."""

import asyncio
import os
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from profilescraper.config import Settings
from profilescraper.core.scraping.pipeline import ExtractionPipeline
from profilescraper.db.models import Business, SelectorConfig

HOME_URL = "https://brightsmile.example"
FAQ_URL = f"{HOME_URL}/faq"

SERVICE_SELECTOR = "ul.sub-nav li a"
PHONE_SELECTOR = ".header-phone"
EMAIL_SELECTOR = ".header-email"
QUESTION_SELECTOR = ".faq-heading"
ANSWER_SELECTOR = ".faq-desc"


class FakePage:
    """
    In-memory PageQuery.

    ``texts`` and ``attributes`` are keyed by URL, then selector. ``failures``
    maps a URL to how many ``goto`` calls fail before it loads (``None``
    means it never loads). ``hang`` lists URLs whose ``goto`` never returns.
    """

    def __init__(
        self,
        texts: dict[str, dict[str, list[str]]] | None = None,
        attributes: dict[str, dict[tuple[str, str], list[str]]] | None = None,
        failures: dict[str, int | None] | None = None,
        hang: set[str] | None = None,
    ) -> None:
        self.texts = texts or {}
        self.attributes = attributes or {}
        self.failures = dict(failures or {})
        self.hang = hang or set()
        self.visits: list[str] = []
        self.queries: list[str] = []
        self.current_url: str | None = None

    async def goto(self, url: str) -> None:
        self.visits.append(url)
        if url in self.hang:
            await asyncio.sleep(3600)
        if url in self.failures:
            remaining = self.failures[url]
            if remaining is None:
                raise ConnectionError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
            if remaining > 0:
                self.failures[url] = remaining - 1
                raise ConnectionError(f"net::ERR_CONNECTION_RESET at {url}")
        self.current_url = url

    async def query_text(self, selector: str) -> list[str]:
        self.queries.append(selector)
        return list(self.texts.get(self.current_url or "", {}).get(selector, []))

    async def query_attribute(self, selector: str, name: str) -> list[str]:
        return list(self.attributes.get(self.current_url or "", {}).get((selector, name), []))

    def visit_count(self, url: str) -> int:
        return self.visits.count(url)


class FakeBrowserFactory:
    """Browser session factory that hands out a FakePage and counts launches."""

    def __init__(self, page: FakePage, launch_error: Exception | None = None) -> None:
        self.page = page
        self.launch_error = launch_error
        self.launches = 0
        self.releases = 0
        self.business_ids: list[str | None] = []

    def __call__(self, business_id: str | None = None) -> Any:
        factory = self
        self.business_ids.append(business_id)

        @asynccontextmanager
        async def session():  # type: ignore[no-untyped-def]
            factory.launches += 1
            if factory.launch_error is not None:
                raise factory.launch_error
            try:
                yield factory.page
            finally:
                factory.releases += 1

        return session()


def query_result(value: Any) -> MagicMock:
    """Mock of a SQLAlchemy result whose scalar_one_or_none returns ``value``."""
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=value)
    return result


def make_session(*rows: Any) -> MagicMock:
    """
    Create a mock async session.

    Each ``execute`` call returns the next row in ``rows``; with no rows every
    lookup finds nothing.
    """
    session = MagicMock()
    if rows:
        session.execute = AsyncMock(side_effect=[query_result(row) for row in rows])
    else:
        session.execute = AsyncMock(return_value=query_result(None))
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


def make_session_factory(*sessions: MagicMock) -> Callable[[], Any]:
    """Session factory yielding the given sessions in order, one per use."""
    remaining = iter(sessions)

    @asynccontextmanager
    async def factory():  # type: ignore[no-untyped-def]
        yield next(remaining)

    return factory


@pytest.fixture
def business() -> Business:
    """Business with a reachable website."""
    return Business(
        business_id="bright-smile",
        business_name="Bright Smile Dental",
        website_url=HOME_URL,
    )


@pytest.fixture
def selectors() -> SelectorConfig:
    """Selector config with every field set."""
    return SelectorConfig(
        business_id="bright-smile",
        service_selector=SERVICE_SELECTOR,
        phone_selector=PHONE_SELECTOR,
        email_selector=EMAIL_SELECTOR,
        faq_question_selector=QUESTION_SELECTOR,
        faq_answer_selector=ANSWER_SELECTOR,
    )


@pytest.fixture
def site() -> FakePage:
    """A small dental practice website with a home page and an FAQ page."""
    return FakePage(
        texts={
            HOME_URL: {
                SERVICE_SELECTOR: [
                    "Cleaning",
                    "Dr. Smith",
                    "Ab",
                    "Whitening",
                    "Meet Our Team",
                    "Invisalign",
                ],
                PHONE_SELECTOR: ["(555) 123-4567"],
                EMAIL_SELECTOR: ["hello@brightsmile.example"],
            },
            FAQ_URL: {
                QUESTION_SELECTOR: [
                    "Do you take insurance?",
                    "Are you open on weekends?",
                    "How often should I get a cleaning?",
                ],
                ANSWER_SELECTOR: [
                    "We accept most major plans.",
                    "Saturdays from 9 to 1.",
                ],
            },
        }
    )


@pytest.fixture
def fast_pipeline_kwargs() -> dict[str, Any]:
    """Pipeline timing overrides that keep tests fast."""
    return {
        "retry_attempts": 3,
        "retry_delay_ms": 0,
        "navigation_timeout_ms": 1000,
        "settle_delay_ms": 0,
        "max_services": 10,
        "max_faqs": 5,
        "faq_path": "/faq",
        "contact_fallback_selectors": True,
    }


@pytest.fixture
def make_pipeline(
    fast_pipeline_kwargs: dict[str, Any],
) -> Callable[..., tuple[ExtractionPipeline, FakeBrowserFactory]]:
    """Build a pipeline over a FakePage, returning it with its browser factory."""

    def build(
        page: FakePage, launch_error: Exception | None = None, **overrides: Any
    ) -> tuple[ExtractionPipeline, FakeBrowserFactory]:
        browser = FakeBrowserFactory(page, launch_error=launch_error)
        pipeline = ExtractionPipeline(
            browser_factory=browser, **{**fast_pipeline_kwargs, **overrides}
        )
        return pipeline, browser

    return build


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    """
    Provide test configuration with overrides.

    Yields:
        Settings instance for testing
    """
    # Save original environment
    original_env = os.environ.copy()

    os.environ["DATABASE_URL"] = "postgresql+asyncpg://postgres@localhost/profilescraper_test"
    os.environ["LOG_LEVEL"] = "DEBUG"
    os.environ["RETRY_ATTEMPTS"] = "5"
    os.environ["SETTLE_DELAY_MS"] = "0"
    os.environ["BROWSER_LAUNCH_ARGS"] = "--no-sandbox, --disable-gpu"

    settings = Settings(_env_file=None)

    yield settings

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)
