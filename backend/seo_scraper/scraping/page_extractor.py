"""
Page Extractor - SEO field extraction from a loaded page snapshot

Every field is resolved independently: a selector that blows up only blanks
its own source, never the rest of the record.
"""

import json
from typing import Any, Callable, Optional

import structlog
from bs4 import BeautifulSoup, FeatureNotFound
from pydantic import BaseModel

from ..core.exceptions import ExtractionFault
from .models import ExtractionRecord, LocalizedField, PageState

logger = structlog.get_logger(__name__)


class ExtractionSelectors(BaseModel):
    """CSS selectors for each extracted source"""
    title: str = "title"
    og_title: str = 'meta[property="og:title"]'
    title_ar: str = 'meta[property="og:title:ar"]'
    description: str = 'meta[name="description"]'
    og_description: str = 'meta[property="og:description"]'
    description_ar: str = 'meta[name="description:ar"]'
    h1: str = ".SeoComponents_seoMetaTags__5b_Dl h1"
    h1_ar: Optional[str] = None
    intro_text: str = "#intro_copy"
    intro_text_ar: Optional[str] = None
    structured_data: str = "script#ld-collection"


DEFAULT_SELECTORS = ExtractionSelectors()


def soup_of(html: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(html, "lxml")
    except FeatureNotFound:
        return BeautifulSoup(html, "html.parser")


def element_text(soup: BeautifulSoup, selector: str) -> str:
    element = soup.select_one(selector)
    if element is None:
        return ""
    return element.get_text().strip()


def meta_content(soup: BeautifulSoup, selector: str) -> str:
    element = soup.select_one(selector)
    if element is None or not element.get("content"):
        return ""
    return str(element.get("content")).strip()


def cascade(*candidates: str) -> str:
    """
    Later sources override earlier ones, but only when non-empty

    Candidates arrive already stripped, so a whitespace-only tag counts as empty.
    """
    value = ""
    for candidate in candidates:
        if candidate:
            value = candidate
    return value


def _lookup(
    field: str,
    reader: Callable[[BeautifulSoup, str], Any],
    soup: BeautifulSoup,
    selector: Optional[str],
    default: Any = "",
) -> Any:
    if not selector:
        return default
    try:
        return reader(soup, selector)
    except Exception as e:
        fault = ExtractionFault(field, str(e))
        logger.warning("Field lookup failed",
                       field=fault.field,
                       selector=selector,
                       error=fault.message,
                       error_type=type(e).__name__)
        return default


def structured_data(soup: BeautifulSoup, selector: str) -> Optional[Any]:
    """Parse the JSON payload of the structured-data script, if any"""
    script = soup.select_one(selector)
    if script is None:
        return None
    raw = (script.string or script.get_text() or "").strip()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Invalid structured data", selector=selector, error=str(e))
        return None


def extract_seo_data(
    page_state: PageState,
    selectors: Optional[ExtractionSelectors] = None
) -> ExtractionRecord:
    """
    Extract SEO fields from a loaded page

    Args:
        page_state: Page snapshot taken after load-settle
        selectors: Optional selector overrides

    Returns:
        Extraction record; missing targets come back as empty strings
    """
    selectors = selectors or DEFAULT_SELECTORS
    soup = soup_of(page_state.html)

    meta_title = LocalizedField(
        en=cascade(
            _lookup("meta_title.en", element_text, soup, selectors.title),
            _lookup("meta_title.en", meta_content, soup, selectors.og_title),
        ),
        ar=_lookup("meta_title.ar", meta_content, soup, selectors.title_ar),
    )
    meta_description = LocalizedField(
        en=cascade(
            _lookup("meta_description.en", meta_content, soup, selectors.description),
            _lookup("meta_description.en", meta_content, soup, selectors.og_description),
        ),
        ar=_lookup("meta_description.ar", meta_content, soup, selectors.description_ar),
    )
    h1 = LocalizedField(
        en=_lookup("h1.en", element_text, soup, selectors.h1),
        ar=_lookup("h1.ar", element_text, soup, selectors.h1_ar),
    )
    intro_text = LocalizedField(
        en=_lookup("intro_text.en", element_text, soup, selectors.intro_text),
        ar=_lookup("intro_text.ar", element_text, soup, selectors.intro_text_ar),
    )

    return ExtractionRecord(
        url=page_state.url,
        final_url=page_state.final_url,
        meta_title=meta_title,
        meta_description=meta_description,
        h1=h1,
        intro_text=intro_text,
        structured_data=_lookup("structured_data", structured_data, soup,
                                selectors.structured_data, default=None),
        status_code=page_state.status_code,
        timestamp=page_state.captured_at,
    )
