"""Configuration management for the profile scraper using Pydantic Settings."""

from typing import Annotated

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database settings
    database_url: str = Field(
        default="postgresql+asyncpg://postgres@localhost/profilescraper_local",
        description="PostgreSQL database URL with asyncpg driver",
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL queries to console",
    )
    database_pool_size: int = Field(
        default=5,
        description="Connections kept open in the pool",
    )
    database_max_overflow: int = Field(
        default=10,
        description="Extra connections allowed above the pool size under load",
    )

    # Browser settings
    browser_executable_path: str | None = Field(
        default=None,
        description="Path to a Chromium executable (uses Playwright's bundled browser if unset)",
    )
    browser_headless: bool = Field(
        default=True,
        description="Run the browser without a visible window",
    )
    browser_launch_args: Annotated[list[str], NoDecode] = Field(
        default=["--no-sandbox", "--disable-setuid-sandbox"],
        description="Extra command line flags passed to the browser process",
    )
    browser_user_agent: str | None = Field(
        default=None,
        description="User agent override for the browser context",
    )

    # Scrape timing
    navigation_timeout_ms: int = Field(
        default=60000,
        description="Timeout for a single page navigation attempt",
    )
    retry_attempts: int = Field(
        default=3,
        description="Navigation attempts before a page is given up on",
    )
    retry_delay_ms: int = Field(
        default=2000,
        description="Fixed delay between navigation attempts",
    )
    settle_delay_ms: int = Field(
        default=3000,
        description="Wait after page load so client-rendered content can appear",
    )
    scrape_timeout_ms: int = Field(
        default=120000,
        description="Budget for one scrape; the FAQ page gets what the home page leaves of it (0 disables)",
    )

    # Extraction settings
    faq_path: str = Field(
        default="/faq",
        description="Path appended to the business website URL to reach its FAQ page",
    )
    max_services: int = Field(
        default=10,
        description="Maximum number of services kept per scrape (0 keeps all)",
    )
    max_faqs: int = Field(
        default=5,
        description="Maximum number of FAQ pairs kept per scrape (0 keeps all)",
    )
    contact_fallback_selectors: bool = Field(
        default=True,
        description="Try common tel:/mailto: selectors when the configured contact selector finds nothing",
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    environment: str = Field(
        default="development",
        description="Environment (development or production)",
    )

    # CORS settings
    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins for API requests",
    )

    # API Security settings
    api_key: SecretStr | None = Field(
        default=None,
        description="Primary API key for authentication (required in production)",
    )
    require_api_key: bool = Field(
        default=True,
        description="Require API key authentication for protected endpoints",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("cors_allowed_origins", "browser_launch_args", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Parse comma-separated strings into lists."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("faq_path")
    @classmethod
    def normalize_faq_path(cls, v: str) -> str:
        """Ensure the FAQ path starts with a single slash."""
        return "/" + v.strip().lstrip("/")

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate at least one navigation attempt is made."""
        if v < 1:
            raise ValueError(f"Invalid retry_attempts: {v}. Must be at least 1")
        return v

    @field_validator(
        "navigation_timeout_ms",
        "retry_delay_ms",
        "settle_delay_ms",
        "scrape_timeout_ms",
        "max_services",
        "max_faqs",
    )
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Validate timing and limit values are not negative."""
        if v < 0:
            raise ValueError(f"Value must not be negative, got {v}")
        return v

    @model_validator(mode="after")
    def validate_api_key(self) -> "Settings":
        """Validate API key is set when required in production."""
        if (
            self.require_api_key
            and self.environment == "production"
            and not self.api_key
        ):
            raise ValueError(
                "API_KEY must be set when REQUIRE_API_KEY=true in production environment. "
                "Set API_KEY environment variable or set REQUIRE_API_KEY=false."
            )
        return self


# Global settings instance
settings = Settings()
