"""
Application configuration
"""

from functools import lru_cache
from typing import List

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationException


GOOGLEBOT_USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 6.0.1; Nexus 5X Build/MMB29P) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/W.X.Y.Z Mobile Safari/537.36 "
    "(compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
)

DEFAULT_BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
]

RETRY_STRATEGIES = ("fixed_delay", "linear_backoff", "exponential_backoff")


class Settings(BaseSettings):
    """Environment-backed settings used to seed a ScraperConfig"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or console

    # Input / Output
    URLS_FILE: str = "urls.txt"
    OUTPUT_DIR: str = "data"

    # Fetching
    CONCURRENCY: int = 3
    REQUEST_TIMEOUT_MS: int = 30000
    SETTLE_GRACE_MS: int = 2000
    HEADLESS: bool = True

    # Retries
    MAX_RETRIES: int = 2
    RETRY_DELAY_SECONDS: float = 3.0
    RETRY_STRATEGY: str = "fixed_delay"

    # Identity
    USER_AGENT: str = GOOGLEBOT_USER_AGENT
    ACCEPT_LANGUAGE: str = "en-US,en;q=0.9,ar;q=0.8"
    ACCEPT: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class ScraperConfig(BaseModel):
    """Explicit configuration for a single scraping run"""

    concurrency: int = 3
    timeout_ms: int = 30000
    max_retries: int = 2
    retry_delay_seconds: float = 3.0
    retry_strategy: str = "fixed_delay"
    settle_grace_ms: int = 2000
    headless: bool = True
    user_agent: str = GOOGLEBOT_USER_AGENT
    accept_language: str = "en-US,en;q=0.9,ar;q=0.8"
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    browser_args: List[str] = Field(default_factory=lambda: list(DEFAULT_BROWSER_ARGS))

    @field_validator("concurrency")
    @classmethod
    def _check_concurrency(cls, value: int) -> int:
        if value < 1:
            raise ValueError("concurrency must be a positive integer")
        return value

    @field_validator("timeout_ms")
    @classmethod
    def _check_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("timeout_ms must be positive")
        return value

    @field_validator("max_retries", "settle_grace_ms")
    @classmethod
    def _check_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("value must not be negative")
        return value

    @field_validator("retry_strategy")
    @classmethod
    def _check_strategy(cls, value: str) -> str:
        if value not in RETRY_STRATEGIES:
            raise ValueError(f"retry_strategy must be one of {', '.join(RETRY_STRATEGIES)}")
        return value

    @field_validator("retry_delay_seconds")
    @classmethod
    def _check_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("retry_delay_seconds must not be negative")
        return value

    @property
    def extra_http_headers(self) -> dict:
        return {"Accept-Language": self.accept_language, "Accept": self.accept}

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "ScraperConfig":
        """Build a run configuration from settings, applying non-None overrides"""
        values = {
            "concurrency": settings.CONCURRENCY,
            "timeout_ms": settings.REQUEST_TIMEOUT_MS,
            "max_retries": settings.MAX_RETRIES,
            "retry_delay_seconds": settings.RETRY_DELAY_SECONDS,
            "retry_strategy": settings.RETRY_STRATEGY,
            "settle_grace_ms": settings.SETTLE_GRACE_MS,
            "headless": settings.HEADLESS,
            "user_agent": settings.USER_AGENT,
            "accept_language": settings.ACCEPT_LANGUAGE,
            "accept": settings.ACCEPT,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return build_config(**values)


def build_config(**values) -> ScraperConfig:
    """Validate run configuration, raising ConfigurationException on bad input"""
    try:
        return ScraperConfig(**values)
    except ValueError as e:
        raise ConfigurationException(
            "Invalid scraper configuration",
            error_code="INVALID_CONFIG",
            details={"errors": str(e)},
        ) from e


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance
    """
    return Settings()

