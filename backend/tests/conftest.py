import asyncio
from typing import Dict, List, Optional

import pytest

from seo_scraper.core.config import ScraperConfig
from seo_scraper.core.exceptions import NavigationError
from seo_scraper.scraping.models import PageState
from seo_scraper.scraping.session import BaseSession, BaseSessionEngine

SAMPLE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <title>  Plain Title  </title>
    <meta property="og:title" content="Social Title">
    <meta name="description" content="Plain description">
    <meta property="og:description" content="Social description">
    <meta property="og:title:ar" content="عنوان الصفحة">
    <meta name="description:ar" content="وصف الصفحة">
    <script id="ld-collection" type="application/ld+json">
        {"@context": "https://schema.org", "@type": "CollectionPage", "name": "Cars"}
    </script>
</head>
<body>
    <div class="SeoComponents_seoMetaTags__5b_Dl"><h1> Used cars for sale </h1></div>
    <p id="intro_copy">
        Browse thousands of listings.
    </p>
</body>
</html>
"""


def page_for(url: str, html: str = SAMPLE_HTML) -> PageState:
    return PageState(url=url, final_url=url, html=html, status_code=200)


class FakeSession(BaseSession):
    """Session whose behaviour is scripted per location by the owning engine"""

    def __init__(self, session_id: str, engine: "FakeEngine"):
        super().__init__(session_id)
        self.engine = engine
        self.closed = False

    async def fetch(self, location: str, timeout_ms: int) -> PageState:
        self.engine.fetch_calls.append(location)
        attempt = self.engine.attempts.get(location, 0) + 1
        self.engine.attempts[location] = attempt

        if self.engine.delay:
            await asyncio.sleep(self.engine.delay)

        error = self.engine.errors.get(location)
        if error is not None and attempt <= self.engine.fail_times.get(location, 10 ** 6):
            raise error
        return page_for(location, self.engine.pages.get(location, SAMPLE_HTML))

    async def close(self) -> None:
        self.closed = True


class FakeEngine(BaseSessionEngine):
    """In-memory engine that counts lifecycle calls"""

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        errors: Optional[Dict[str, Exception]] = None,
        fail_times: Optional[Dict[str, int]] = None,
        pages: Optional[Dict[str, str]] = None,
        delay: float = 0.01,
        startup_error: Optional[Exception] = None
    ):
        super().__init__(config or ScraperConfig())
        self.errors = errors or {}
        self.fail_times = fail_times or {}
        self.pages = pages or {}
        self.delay = delay
        self.startup_error = startup_error
        self.launch_calls = 0
        self.shutdown_calls = 0
        self.fetch_calls: List[str] = []
        self.attempts: Dict[str, int] = {}
        self.sessions: List[FakeSession] = []

    async def _launch(self) -> None:
        self.launch_calls += 1
        if self.startup_error is not None:
            raise self.startup_error

    async def _shutdown(self) -> None:
        self.shutdown_calls += 1

    async def _open_session(self, session_id: str) -> BaseSession:
        session = FakeSession(session_id, self)
        self.sessions.append(session)
        return session


@pytest.fixture
def fast_config():
    """Run configuration without delays."""
    return ScraperConfig(concurrency=2, timeout_ms=1000, max_retries=2,
                         retry_delay_seconds=0, settle_grace_ms=0)


@pytest.fixture
def make_engine():
    """Factory for fake engines; remembers every engine it built."""
    built: List[FakeEngine] = []

    def factory(**kwargs) -> FakeEngine:
        engine = FakeEngine(**kwargs)
        built.append(engine)
        return engine

    factory.built = built
    return factory


@pytest.fixture
def navigation_error():
    return NavigationError("net::ERR_NAME_NOT_RESOLVED", url="https://broken.example/")
