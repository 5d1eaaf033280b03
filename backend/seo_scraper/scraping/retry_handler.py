"""
Retry Handler - Bounded per-location retry with a configurable delay policy
"""

import asyncio
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Any

import structlog
from pydantic import BaseModel, Field

from ..core.config import ScraperConfig
from .models import FetchFailure, FetchOutcome, FetchSuccess, Location
from .session import BaseSessionEngine

logger = structlog.get_logger(__name__)


class RetryStrategy(str, Enum):
    """Retry delay strategies"""
    FIXED_DELAY = "fixed_delay"
    LINEAR_BACKOFF = "linear_backoff"
    EXPONENTIAL_BACKOFF = "exponential_backoff"


class RetryConfig(BaseModel):
    """Configuration for retry logic"""
    strategy: RetryStrategy = RetryStrategy.FIXED_DELAY
    max_retries: int = 2
    delay_seconds: float = 3.0
    backoff_multiplier: float = 2.0
    max_delay_seconds: float = 60.0  # caps linear and exponential backoff only

    @classmethod
    def from_scraper_config(cls, config: ScraperConfig) -> "RetryConfig":
        return cls(
            strategy=RetryStrategy(config.retry_strategy),
            max_retries=config.max_retries,
            delay_seconds=config.retry_delay_seconds,
        )


class RetryAttempt(BaseModel):
    """Information about a failed attempt"""
    attempt_number: int
    delay_seconds: float = 0.0
    error_message: str
    error_type: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RetryHandler:
    """Runs one location's fetch+extract chain until it succeeds or the budget runs out"""

    def __init__(self, config: Optional[RetryConfig] = None):
        self.config = config or RetryConfig()
        self.retry_stats: Dict[str, int] = {
            "total_chains": 0,
            "successful_chains": 0,
            "failed_chains": 0,
            "total_attempts": 0,
        }

    async def attempt(
        self,
        engine: BaseSessionEngine,
        location: Location,
        timeout_ms: int,
        max_retries: Optional[int] = None
    ) -> FetchOutcome:
        """
        Fetch and extract a location, retrying on any error

        Args:
            engine: Engine that provides a fresh session per attempt
            location: URL to fetch
            timeout_ms: Per-attempt load-settle timeout
            max_retries: Retries after the first attempt (defaults to config)

        Returns:
            FetchSuccess, or FetchFailure after max_retries + 1 attempts
        """
        max_retries = self.config.max_retries if max_retries is None else max_retries
        attempts: List[RetryAttempt] = []

        for attempt_number in range(1, max_retries + 2):
            logger.info("Scraping location", url=location, attempt=attempt_number)
            try:
                async with engine.session() as session:
                    page_state = await session.fetch(location, timeout_ms)
                    record = session.extract(page_state)
            except Exception as e:
                attempt = RetryAttempt(
                    attempt_number=attempt_number,
                    error_message=str(e),
                    error_type=type(e).__name__
                )
                attempts.append(attempt)

                logger.warning("Scrape attempt failed",
                               url=location,
                               attempt=attempt_number,
                               error=attempt.error_message,
                               error_type=attempt.error_type)

                if attempt_number <= max_retries:
                    attempt.delay_seconds = self.calculate_delay(attempt_number)
                    logger.info("Retrying after delay",
                                url=location,
                                next_attempt=attempt_number + 1,
                                delay_seconds=attempt.delay_seconds)
                    await asyncio.sleep(attempt.delay_seconds)
                continue

            self._update_stats(True, attempt_number)
            logger.info("Scraped location", url=location, attempts=attempt_number)
            return FetchSuccess(record=record, attempts=attempt_number)

        final_attempt = attempts[-1]
        self._update_stats(False, len(attempts))
        logger.error("All retry attempts failed",
                     url=location,
                     total_attempts=len(attempts),
                     final_error=final_attempt.error_message)

        return FetchFailure(
            url=location,
            error=final_attempt.error_message,
            error_type=final_attempt.error_type,
            attempts=len(attempts)
        )

    def calculate_delay(self, attempt_number: int) -> float:
        """Calculate delay before the next attempt based on strategy"""
        config = self.config
        if config.strategy == RetryStrategy.LINEAR_BACKOFF:
            delay = config.delay_seconds * attempt_number
        elif config.strategy == RetryStrategy.EXPONENTIAL_BACKOFF:
            delay = config.delay_seconds * (config.backoff_multiplier ** (attempt_number - 1))
        else:
            return config.delay_seconds

        return min(delay, config.max_delay_seconds)

    def _update_stats(self, success: bool, attempts: int):
        self.retry_stats["total_chains"] += 1
        self.retry_stats["total_attempts"] += attempts
        if success:
            self.retry_stats["successful_chains"] += 1
        else:
            self.retry_stats["failed_chains"] += 1

    def get_retry_stats(self) -> Dict[str, Any]:
        """Get retry statistics"""
        return dict(self.retry_stats)
