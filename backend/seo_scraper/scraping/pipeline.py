"""
Pipeline entry points
"""

import asyncio
from typing import Optional, Sequence

from ..core.config import ScraperConfig, build_config
from .batch_processor import BatchProcessor
from .models import Location, RunResult
from .page_extractor import ExtractionSelectors
from .session import EngineFactory


def resolve_config(
    concurrency: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    max_retries: Optional[int] = None,
    config: Optional[ScraperConfig] = None
) -> ScraperConfig:
    """Apply explicit arguments on top of a base configuration"""
    base = config or ScraperConfig()
    overrides = {
        "concurrency": concurrency,
        "timeout_ms": timeout_ms,
        "max_retries": max_retries,
    }
    values = base.model_dump()
    values.update({key: value for key, value in overrides.items() if value is not None})
    return build_config(**values)


async def run_async(
    locations: Sequence[Location],
    concurrency: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    max_retries: Optional[int] = None,
    *,
    config: Optional[ScraperConfig] = None,
    engine_factory: Optional[EngineFactory] = None,
    selectors: Optional[ExtractionSelectors] = None
) -> RunResult:
    run_config = resolve_config(concurrency, timeout_ms, max_retries, config)
    processor = BatchProcessor(run_config, engine_factory=engine_factory, selectors=selectors)
    return await processor.run(list(locations))


def run(
    locations: Sequence[Location],
    concurrency: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    max_retries: Optional[int] = None,
    *,
    config: Optional[ScraperConfig] = None,
    engine_factory: Optional[EngineFactory] = None,
    selectors: Optional[ExtractionSelectors] = None
) -> RunResult:
    """
    Scrape locations and block until the whole batch has finished

    Args:
        locations: URLs to scrape
        concurrency: Maximum sessions open at once (default 3)
        timeout_ms: Per-attempt load-settle timeout (default 30000)
        max_retries: Retries per location after the first attempt (default 2)
        config: Base configuration for anything not passed explicitly
        engine_factory: Builds the shared engine (Playwright by default)
        selectors: Extraction selector overrides

    Returns:
        RunResult; per-location failures are reported in ``failures``

    Raises:
        ConfigurationException: invalid concurrency, timeout or retry count
        EngineStartupError: the browser engine could not be started
    """
    return asyncio.run(run_async(
        locations,
        concurrency,
        timeout_ms,
        max_retries,
        config=config,
        engine_factory=engine_factory,
        selectors=selectors,
    ))
