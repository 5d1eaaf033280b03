"""
Command-line entry point
"""

import argparse
import sys
from typing import List, Optional

from .core.config import ScraperConfig, get_settings
from .core.exceptions import ConfigurationException, EngineStartupError, SourceError
from .core.logging import get_logger, setup_logging
from .scraping.pipeline import run
from .storage import load_locations, save_results


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="seo-scraper",
        description="Scrape SEO fields from a list of URLs with a headless browser."
    )
    parser.add_argument("--urls", default=settings.URLS_FILE, help="File with one URL per line")
    parser.add_argument("--output-dir", default=settings.OUTPUT_DIR, help="Directory for seo-results.json")
    parser.add_argument("--concurrency", type=int, default=None, help="Pages scraped at once")
    parser.add_argument("--timeout-ms", type=int, default=None, help="Per-page load timeout in milliseconds")
    parser.add_argument("--max-retries", type=int, default=None, help="Retries per URL after the first attempt")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    parser.add_argument("--log-format", choices=["json", "console"], default=settings.LOG_FORMAT)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_format)
    logger = get_logger(__name__)

    try:
        config = ScraperConfig.from_settings(
            get_settings(),
            concurrency=args.concurrency,
            timeout_ms=args.timeout_ms,
            max_retries=args.max_retries,
        )
    except ConfigurationException as e:
        logger.error("Invalid configuration", error=e.message, details=e.details)
        return 2

    logger.info("Starting SEO scraper")
    try:
        locations = load_locations(args.urls)
        result = run(locations, config=config)
    except (SourceError, EngineStartupError) as e:
        logger.error("Fatal error", error=e.message, error_code=e.error_code)
        return 1

    save_results(result, args.output_dir)

    logger.info("Summary",
                succeeded=result.stats.succeeded,
                failed=result.stats.failed,
                success_rate=f"{result.stats.success_ratio * 100:.1f}%")
    for failure in result.failures:
        logger.warning("Failed URL", url=failure.url, error=failure.error, attempts=failure.attempts)

    return 0


if __name__ == "__main__":
    sys.exit(main())
