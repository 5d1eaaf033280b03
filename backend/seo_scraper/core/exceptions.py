from typing import Any, Dict, Optional


class ScraperException(Exception):
    """Base exception for the SEO scraper."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class FetchError(ScraperException):
    """Base exception for a failed page fetch."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.url = url
        super().__init__(message, error_code=error_code, details=details)


class PageLoadTimeoutError(FetchError, TimeoutError):
    """The page did not settle before the fetch timeout."""
    pass


class NavigationError(FetchError):
    """Navigation failed (DNS, refused connection, redirect loop, ...)."""
    pass


class ExtractionFault(ScraperException):
    """A single field lookup failed while extracting page data."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message, error_code="EXTRACTION_FAULT", details={"field": field})


class EngineStartupError(ScraperException):
    """The shared browser engine could not be started."""
    pass


class ConfigurationException(ScraperException):
    """Exception for configuration-related errors."""
    pass


class SourceError(ScraperException):
    """The location source could not be read."""
    pass
