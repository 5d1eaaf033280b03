"""
Batch Processor - Windowed concurrent scraping over a shared browser engine

Locations are split into consecutive windows of ``concurrency`` items. Windows
run one after another; every location in a window runs its retry chain
concurrently, and the next window starts only once all of them are done.
"""

import asyncio
from datetime import datetime
from typing import List, Optional, Sequence

import structlog
from pydantic import BaseModel

from ..core.config import ScraperConfig
from .aggregator import RunAggregator
from .models import FetchFailure, FetchOutcome, FetchSuccess, Location, RunResult, utcnow
from .page_extractor import ExtractionSelectors
from .retry_handler import RetryConfig, RetryHandler
from .session import BaseSessionEngine, EngineFactory, PlaywrightEngine

logger = structlog.get_logger(__name__)


class BatchMetrics(BaseModel):
    """Metrics for the last run"""
    total_windows: int = 0
    completed_windows: int = 0
    total_items_processed: int = 0
    successful_items: int = 0
    failed_items: int = 0
    processing_time_seconds: float = 0.0
    peak_active_sessions: int = 0


def split_windows(locations: Sequence[Location], size: int) -> List[List[Location]]:
    """Consecutive windows of ``size``; the last one may be shorter"""
    return [list(locations[i:i + size]) for i in range(0, len(locations), size)]


class BatchProcessor:
    """Drive retry chains over windows of locations"""

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        engine_factory: Optional[EngineFactory] = None,
        retry_handler: Optional[RetryHandler] = None,
        aggregator: Optional[RunAggregator] = None,
        selectors: Optional[ExtractionSelectors] = None
    ):
        self.config = config or ScraperConfig()
        self.engine_factory = engine_factory or (lambda cfg: PlaywrightEngine(cfg, selectors))
        self.retry_handler = retry_handler or RetryHandler(RetryConfig.from_scraper_config(self.config))
        self.aggregator = aggregator or RunAggregator()
        self.metrics = BatchMetrics()

    async def run(self, locations: Sequence[Location]) -> RunResult:
        """
        Scrape every location and aggregate the outcomes

        Args:
            locations: URLs in reporting order; duplicates are scraped independently

        Returns:
            RunResult with exactly one outcome per input location

        Raises:
            EngineStartupError: the shared browser engine could not be started
        """
        started_at = utcnow()
        windows = split_windows(locations, self.config.concurrency)
        self.metrics = BatchMetrics(total_windows=len(windows))

        logger.info("Starting scrape run",
                    locations=len(locations),
                    windows=len(windows),
                    concurrency=self.config.concurrency)

        engine = self.engine_factory(self.config)
        await engine.start()

        outcomes: List[FetchOutcome] = []
        try:
            for index, window in enumerate(windows, start=1):
                logger.info("Processing window",
                            window=index,
                            total_windows=len(windows),
                            size=len(window))
                outcomes.extend(await self._process_window(engine, window))
                self.metrics.completed_windows += 1
        finally:
            await engine.close()
            self.metrics.peak_active_sessions = engine.peak_active_sessions
            if engine.active_sessions:
                logger.warning("Sessions left open at shutdown", active_sessions=engine.active_sessions)

        result = self.aggregator.aggregate(outcomes, started_at=started_at)
        self._update_metrics(result, started_at)
        return result

    async def _process_window(
        self,
        engine: BaseSessionEngine,
        window: List[Location]
    ) -> List[FetchOutcome]:
        tasks = [
            self.retry_handler.attempt(engine, location, self.config.timeout_ms, self.config.max_retries)
            for location in window
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes: List[FetchOutcome] = []
        for location, result in zip(window, results):
            if isinstance(result, (FetchSuccess, FetchFailure)):
                outcomes.append(result)
            elif isinstance(result, Exception):
                logger.error("Retry chain crashed",
                             url=location,
                             error=str(result),
                             error_type=type(result).__name__)
                outcomes.append(FetchFailure(
                    url=location,
                    error=str(result),
                    error_type=type(result).__name__,
                    attempts=0
                ))
            else:
                # KeyboardInterrupt, SystemExit and friends abort the run
                raise result

        return outcomes

    def _update_metrics(self, result: RunResult, started_at: datetime):
        self.metrics.total_items_processed = result.stats.total
        self.metrics.successful_items = result.stats.succeeded
        self.metrics.failed_items = result.stats.failed
        self.metrics.processing_time_seconds = (result.timestamp - started_at).total_seconds()

        logger.info("Scrape run completed",
                    succeeded=result.stats.succeeded,
                    failed=result.stats.failed,
                    processing_time=self.metrics.processing_time_seconds,
                    peak_active_sessions=self.metrics.peak_active_sessions)
