from datetime import datetime, timezone

from conftest import SAMPLE_HTML, page_for
from seo_scraper.scraping.page_extractor import ExtractionSelectors, cascade, extract_seo_data


def test_extracts_all_fields():
    """Test extraction of every field from a complete page."""
    record = extract_seo_data(page_for("https://example.com/cars"))

    assert record.url == "https://example.com/cars"
    assert record.meta_title.en == "Social Title"
    assert record.meta_title.ar == "عنوان الصفحة"
    assert record.meta_description.en == "Social description"
    assert record.meta_description.ar == "وصف الصفحة"
    assert record.h1.en == "Used cars for sale"
    assert record.h1.ar == ""
    assert record.intro_text.en == "Browse thousands of listings."
    assert record.structured_data == {
        "@context": "https://schema.org",
        "@type": "CollectionPage",
        "name": "Cars",
    }
    assert record.status_code == 200


def test_plain_title_kept_when_social_title_empty():
    html = """<html><head><title>Plain Title</title>
    <meta property="og:title" content="">
    <meta name="description" content="Plain description">
    </head><body></body></html>"""

    record = extract_seo_data(page_for("https://example.com/", html))

    assert record.meta_title.en == "Plain Title"
    assert record.meta_description.en == "Plain description"


def test_social_tags_used_without_plain_tags():
    html = """<html><head>
    <meta property="og:title" content="Only Social">
    <meta property="og:description" content="Only social description">
    </head><body></body></html>"""

    record = extract_seo_data(page_for("https://example.com/", html))

    assert record.meta_title.en == "Only Social"
    assert record.meta_description.en == "Only social description"


def test_missing_targets_are_empty_strings():
    record = extract_seo_data(page_for("https://example.com/", "<html><body><p>hi</p></body></html>"))

    for field in (record.meta_title, record.meta_description, record.h1, record.intro_text):
        assert field.en == ""
        assert field.ar == ""
    assert record.structured_data is None


def test_invalid_structured_data_keeps_other_fields():
    html = SAMPLE_HTML.replace('"name": "Cars"}', '"name": "Cars",,}')

    record = extract_seo_data(page_for("https://example.com/", html))

    assert record.structured_data is None
    assert record.meta_title.en == "Social Title"
    assert record.h1.en == "Used cars for sale"


def test_empty_structured_data_is_absent():
    html = '<html><head><script id="ld-collection">   </script></head></html>'

    record = extract_seo_data(page_for("https://example.com/", html))

    assert record.structured_data is None


def test_broken_selector_only_blanks_its_own_field():
    selectors = ExtractionSelectors(h1="div[[broken", intro_text_ar="p#intro_copy")

    record = extract_seo_data(page_for("https://example.com/"), selectors)

    assert record.h1.en == ""
    assert record.intro_text.ar == "Browse thousands of listings."
    assert record.meta_title.en == "Social Title"
    assert record.intro_text.en == "Browse thousands of listings."


def test_extraction_is_idempotent():
    page = page_for("https://example.com/cars")

    assert extract_seo_data(page) == extract_seo_data(page)


def test_timestamp_comes_from_capture_time():
    captured_at = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    page = page_for("https://example.com/").model_copy(update={"captured_at": captured_at})

    assert extract_seo_data(page).timestamp == captured_at


def test_cascade_prefers_non_empty_override():
    assert cascade("default", "override") == "override"
    assert cascade("default", "") == "default"
    assert cascade("", "") == ""
    assert cascade("", "override") == "override"


def test_whitespace_only_social_title_keeps_plain_title():
    html = """<html><head><title>Plain Title</title>
    <meta property="og:title" content="   ">
    </head><body></body></html>"""

    record = extract_seo_data(page_for("https://example.com/", html))

    assert record.meta_title.en == "Plain Title"
