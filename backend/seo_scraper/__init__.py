"""SEO Scraper - headless-browser SEO field extraction in English and Arabic."""

__version__ = "1.0.0"
