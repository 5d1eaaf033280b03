"""
Run Aggregator - Folds fetch outcomes into the run result contract
"""

from datetime import datetime
from typing import Iterable, List, Optional

import structlog

from .models import (
    ExtractionRecord,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
    RunResult,
    RunStats,
    utcnow,
)

logger = structlog.get_logger(__name__)


def success_ratio(succeeded: int, failed: int) -> float:
    total = succeeded + failed
    return succeeded / total if total else 0.0


class RunAggregator:
    """Partition outcomes into successes and failures"""

    def aggregate(
        self,
        outcomes: Iterable[FetchOutcome],
        started_at: Optional[datetime] = None
    ) -> RunResult:
        successes: List[ExtractionRecord] = []
        failures: List[FetchFailure] = []

        for outcome in outcomes:
            if isinstance(outcome, FetchSuccess):
                successes.append(outcome.record)
            elif isinstance(outcome, FetchFailure):
                failures.append(outcome)
            else:
                raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")

        stats = RunStats(
            total=len(successes) + len(failures),
            succeeded=len(successes),
            failed=len(failures),
            success_ratio=success_ratio(len(successes), len(failures)),
        )

        logger.info("Run aggregated",
                    total=stats.total,
                    succeeded=stats.succeeded,
                    failed=stats.failed,
                    success_ratio=round(stats.success_ratio, 4))

        return RunResult(
            successes=successes,
            failures=failures,
            started_at=started_at,
            timestamp=utcnow(),
            stats=stats,
        )
