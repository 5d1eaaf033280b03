"""
Scraping Package

Windowed concurrent fetch-and-extract pipeline: browser sessions, per-location
retry, batch scheduling and run aggregation.
"""

from .models import (
    Location,
    LocalizedField,
    PageState,
    ExtractionRecord,
    FetchSuccess,
    FetchFailure,
    FetchOutcome,
    RunStats,
    RunResult
)
from .page_extractor import ExtractionSelectors, extract_seo_data
from .session import BaseSession, BaseSessionEngine, PlaywrightEngine, PlaywrightSession
from .retry_handler import RetryHandler, RetryConfig, RetryStrategy
from .batch_processor import BatchProcessor, BatchMetrics
from .aggregator import RunAggregator
from .pipeline import run, run_async

__all__ = [
    "Location",
    "LocalizedField",
    "PageState",
    "ExtractionRecord",
    "FetchSuccess",
    "FetchFailure",
    "FetchOutcome",
    "RunStats",
    "RunResult",
    "ExtractionSelectors",
    "extract_seo_data",
    "BaseSession",
    "BaseSessionEngine",
    "PlaywrightEngine",
    "PlaywrightSession",
    "RetryHandler",
    "RetryConfig",
    "RetryStrategy",
    "BatchProcessor",
    "BatchMetrics",
    "RunAggregator",
    "run",
    "run_async"
]
