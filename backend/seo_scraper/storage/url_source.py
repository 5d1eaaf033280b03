from pathlib import Path
from typing import List, Union

import structlog

from ..core.exceptions import SourceError

logger = structlog.get_logger(__name__)


def load_locations(path: Union[str, Path]) -> List[str]:
    """
    Read URLs from a text file, one per line

    Blank lines are skipped and surrounding whitespace is stripped.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SourceError(
            f"Could not read URL list: {path}",
            error_code="URL_SOURCE_UNREADABLE",
            details={"path": str(path), "error": str(e)}
        ) from e

    locations = [line.strip() for line in content.splitlines() if line.strip()]
    logger.info("Loaded URL list", path=str(path), count=len(locations))
    return locations
