import logging
import sys
from typing import Any, Optional

import structlog


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure structured logging for the scraper."""

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    if fmt == "console":
        renderer: Any = structlog.dev.ConsoleRenderer()
    else:
        # JSON formatting for structured logs
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    # Configure structlog
    structlog.configure(
        processors=[
            # Add timestamp
            structlog.processors.TimeStamper(fmt="ISO"),
            # Add log level
            structlog.processors.add_log_level,
            # Add caller info
            structlog.processors.CallsiteParameterAdder(
                parameters=[structlog.processors.CallsiteParameter.PATHNAME,
                            structlog.processors.CallsiteParameter.FUNC_NAME,
                            structlog.processors.CallsiteParameter.LINENO]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> Any:
    """Get a configured logger instance."""
    return structlog.get_logger(name)
