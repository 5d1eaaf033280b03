"""
Browser Sessions - Scoped page sessions on top of a shared browser engine
"""

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

import structlog
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..core.config import ScraperConfig
from ..core.exceptions import (
    EngineStartupError,
    NavigationError,
    PageLoadTimeoutError,
    ScraperException,
)
from .models import ExtractionRecord, Location, PageState
from .page_extractor import ExtractionSelectors, extract_seo_data

logger = structlog.get_logger(__name__)


class BaseSession(ABC):
    """One isolated page context, used for exactly one fetch attempt"""

    def __init__(self, session_id: str, selectors: Optional[ExtractionSelectors] = None):
        self.session_id = session_id
        self.selectors = selectors
        self.released = False

    @abstractmethod
    async def fetch(self, location: Location, timeout_ms: int) -> PageState:
        """
        Navigate to a location and snapshot it once the network settles

        Raises:
            PageLoadTimeoutError: settle not reached within timeout_ms
            NavigationError: any other navigation fault
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the underlying page resources"""
        pass

    def extract(self, page_state: PageState) -> ExtractionRecord:
        return extract_seo_data(page_state, self.selectors)


class BaseSessionEngine(ABC):
    """Shared browser-level resource that hands out sessions"""

    def __init__(
        self,
        config: ScraperConfig,
        selectors: Optional[ExtractionSelectors] = None
    ):
        self.config = config
        self.selectors = selectors
        self.started = False
        self.closed = False

        # Session bookkeeping
        self.active_sessions = 0
        self.peak_active_sessions = 0
        self.sessions_opened = 0
        self.sessions_released = 0

    @abstractmethod
    async def _launch(self) -> None:
        pass

    @abstractmethod
    async def _shutdown(self) -> None:
        pass

    @abstractmethod
    async def _open_session(self, session_id: str) -> BaseSession:
        pass

    async def start(self) -> None:
        """Start the engine; failure here is fatal for the whole run"""
        if self.started:
            return

        try:
            await self._launch()
        except EngineStartupError:
            raise
        except Exception as e:
            logger.error("Browser engine failed to start", error=str(e), error_type=type(e).__name__)
            raise EngineStartupError(
                f"Browser engine could not be started: {e}",
                error_code="ENGINE_STARTUP_FAILED"
            ) from e

        self.started = True
        logger.info("Browser engine started", engine=type(self).__name__)

    async def close(self) -> None:
        """Tear the engine down; later calls are no-ops"""
        if not self.started or self.closed:
            return

        self.closed = True
        try:
            await self._shutdown()
        finally:
            logger.info("Browser engine closed",
                        sessions_opened=self.sessions_opened,
                        sessions_released=self.sessions_released,
                        peak_active_sessions=self.peak_active_sessions)

    async def acquire(self) -> BaseSession:
        if not self.started or self.closed:
            raise ScraperException("Browser engine is not running", error_code="ENGINE_NOT_RUNNING")

        session = await self._open_session(f"session_{self.sessions_opened + 1}")
        self.sessions_opened += 1
        self.active_sessions += 1
        self.peak_active_sessions = max(self.peak_active_sessions, self.active_sessions)
        return session

    async def release(self, session: BaseSession) -> None:
        if session.released:
            return

        session.released = True
        self.active_sessions -= 1
        self.sessions_released += 1
        try:
            await session.close()
        except Exception as e:
            logger.warning("Session close failed",
                           session_id=session.session_id,
                           error=str(e),
                           error_type=type(e).__name__)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[BaseSession]:
        """Acquire a session and release it on every exit path"""
        session = await self.acquire()
        try:
            yield session
        finally:
            await self.release(session)


class PlaywrightSession(BaseSession):
    """Chromium page with crawler identity headers"""

    def __init__(
        self,
        session_id: str,
        context: BrowserContext,
        page: Page,
        config: ScraperConfig,
        selectors: Optional[ExtractionSelectors] = None
    ):
        super().__init__(session_id, selectors)
        self.context = context
        self.page = page
        self.config = config

    async def fetch(self, location: Location, timeout_ms: int) -> PageState:
        try:
            response = await self.page.goto(location, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise PageLoadTimeoutError(
                f"Page did not settle within {timeout_ms}ms",
                url=location,
                error_code="PAGE_LOAD_TIMEOUT"
            ) from e
        except PlaywrightError as e:
            raise NavigationError(str(e), url=location, error_code="NAVIGATION_ERROR") from e

        # Let client-side rendering populate the page
        if self.config.settle_grace_ms:
            await asyncio.sleep(self.config.settle_grace_ms / 1000)

        try:
            html = await self.page.content()
        except PlaywrightError as e:
            raise NavigationError(str(e), url=location, error_code="NAVIGATION_ERROR") from e

        return PageState(
            url=location,
            final_url=self.page.url,
            html=html,
            status_code=response.status if response is not None else None,
        )

    async def close(self) -> None:
        try:
            await self.page.close()
        finally:
            await self.context.close()


class PlaywrightEngine(BaseSessionEngine):
    """Single headless Chromium shared by every session of a run"""

    def __init__(
        self,
        config: ScraperConfig,
        selectors: Optional[ExtractionSelectors] = None
    ):
        super().__init__(config, selectors)
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def _launch(self) -> None:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=self.config.browser_args
            )
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise

    async def _shutdown(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._playwright is not None:
                await self._playwright.stop()
            self._browser = None
            self._playwright = None

    async def _open_session(self, session_id: str) -> BaseSession:
        context = await self._browser.new_context(
            user_agent=self.config.user_agent,
            extra_http_headers=self.config.extra_http_headers
        )
        try:
            page = await context.new_page()
        except Exception:
            await context.close()
            raise

        return PlaywrightSession(session_id, context, page, self.config, self.selectors)


EngineFactory = Callable[[ScraperConfig], BaseSessionEngine]
