"""Application configuration via Pydantic Settings."""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global scraper settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Target marketplace
    BASE_URL: str = "https://www.olx.pl"

    # Pacing: every outbound request waits at least
    # REQUEST_DELAY_MS + random(0, REQUEST_JITTER_MS) since the previous one
    REQUEST_DELAY_MS: int = 2000
    REQUEST_JITTER_MS: int = 1000

    # Direct HTTP retrieval
    REQUEST_TIMEOUT_SECONDS: float = 15.0
    MAX_REDIRECTS: int = 5
    ACCEPT_LANGUAGE: str = "pl-PL,pl;q=0.9,en-US;q=0.5,en;q=0.3"

    # Headless rendering fallback
    PLAYWRIGHT_ENABLED: bool = True
    PLAYWRIGHT_CHROMIUM_EXECUTABLE_PATH: str = ""
    NAVIGATION_TIMEOUT_SECONDS: float = 30.0
    RENDER_SETTLE_SECONDS: float = 2.0

    # Search
    DEFAULT_SEARCH_LIMIT: int = 40

    @model_validator(mode="after")
    def strip_base_url(self) -> "Settings":
        """URLs are built as BASE_URL + "/path", so drop any trailing slash."""
        self.BASE_URL = self.BASE_URL.rstrip("/")
        return self

    @property
    def base_delay_seconds(self) -> float:
        return self.REQUEST_DELAY_MS / 1000.0

    @property
    def jitter_seconds(self) -> float:
        return self.REQUEST_JITTER_MS / 1000.0


settings = Settings()
