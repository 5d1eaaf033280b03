"""
Results Writer - Persist a run result as JSON
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

import structlog

from ..scraping.models import RunResult

logger = structlog.get_logger(__name__)

RESULTS_FILENAME = "seo-results.json"


def result_payload(result: RunResult) -> Dict[str, Any]:
    """JSON-ready view of a run: results, errors, stats and timestamp"""
    return {
        "results": [record.model_dump(mode="json") for record in result.successes],
        "errors": [failure.model_dump(mode="json", exclude={"kind"}) for failure in result.failures],
        "stats": result.stats.model_dump(mode="json"),
        "started_at": result.started_at.isoformat() if result.started_at else None,
        "timestamp": result.timestamp.isoformat(),
    }


def save_results(result: RunResult, output_dir: Union[str, Path]) -> Path:
    """Write ``seo-results.json`` into output_dir, creating it if needed"""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / RESULTS_FILENAME
    path.write_text(
        json.dumps(result_payload(result), indent=2, ensure_ascii=False),
        encoding="utf-8"
    )

    logger.info("Saved results", path=str(path),
                results=len(result.successes), errors=len(result.failures))
    return path
