"""Unit tests for configuration management."""

import pytest
from pydantic import ValidationError

from profilescraper.config import Settings


def test_settings_from_environment(test_settings: Settings):
    """Test that settings load from environment variables."""
    assert (
        test_settings.database_url
        == "postgresql+asyncpg://postgres@localhost/profilescraper_test"
    )
    assert test_settings.log_level == "DEBUG"
    assert test_settings.retry_attempts == 5
    assert test_settings.settle_delay_ms == 0


def test_comma_separated_launch_args(test_settings: Settings):
    """Test that browser flags are parsed from a comma-separated string."""
    assert test_settings.browser_launch_args == ["--no-sandbox", "--disable-gpu"]


def test_default_values(monkeypatch: pytest.MonkeyPatch):
    """Test that default values are set correctly."""
    for name in (
        "NAVIGATION_TIMEOUT_MS",
        "RETRY_ATTEMPTS",
        "RETRY_DELAY_MS",
        "SETTLE_DELAY_MS",
        "SCRAPE_TIMEOUT_MS",
        "FAQ_PATH",
        "MAX_SERVICES",
        "MAX_FAQS",
        "BROWSER_LAUNCH_ARGS",
        "BROWSER_HEADLESS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.navigation_timeout_ms == 60000
    assert settings.retry_attempts == 3
    assert settings.retry_delay_ms == 2000
    assert settings.settle_delay_ms == 3000
    assert settings.scrape_timeout_ms == 120000
    assert settings.faq_path == "/faq"
    assert settings.max_services == 10
    assert settings.max_faqs == 5
    assert settings.browser_headless is True
    assert settings.browser_launch_args == ["--no-sandbox", "--disable-setuid-sandbox"]


def test_faq_path_normalized(monkeypatch: pytest.MonkeyPatch):
    """Test that the FAQ path always starts with exactly one slash."""
    monkeypatch.setenv("FAQ_PATH", "frequently-asked-questions")
    assert Settings(_env_file=None).faq_path == "/frequently-asked-questions"

    monkeypatch.setenv("FAQ_PATH", "//help/faq")
    assert Settings(_env_file=None).faq_path == "/help/faq"


def test_retry_attempts_validation_invalid(monkeypatch: pytest.MonkeyPatch):
    """Test validation error when no navigation attempt would be made."""
    monkeypatch.setenv("RETRY_ATTEMPTS", "0")

    with pytest.raises(ValidationError) as exc_info:
        Settings(_env_file=None)

    assert "Invalid retry_attempts" in str(exc_info.value)


@pytest.mark.parametrize(
    "name", ["NAVIGATION_TIMEOUT_MS", "RETRY_DELAY_MS", "SCRAPE_TIMEOUT_MS", "MAX_FAQS"]
)
def test_negative_values_rejected(monkeypatch: pytest.MonkeyPatch, name: str):
    """Test that timing and limit values cannot be negative."""
    monkeypatch.setenv(name, "-1")

    with pytest.raises(ValidationError) as exc_info:
        Settings(_env_file=None)

    assert "must not be negative" in str(exc_info.value)


def test_production_requires_api_key(monkeypatch: pytest.MonkeyPatch):
    """Test that production refuses to start without an API key."""
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("REQUIRE_API_KEY", "true")
    monkeypatch.delenv("API_KEY", raising=False)

    with pytest.raises(ValidationError) as exc_info:
        Settings(_env_file=None)

    assert "API_KEY must be set" in str(exc_info.value)


def test_production_with_api_key(monkeypatch: pytest.MonkeyPatch):
    """Test that production starts once an API key is provided."""
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("API_KEY", "prod-key-123")

    settings = Settings(_env_file=None)

    assert settings.api_key is not None
    assert settings.api_key.get_secret_value() == "prod-key-123"
