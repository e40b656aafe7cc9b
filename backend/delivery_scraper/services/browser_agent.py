from playwright.async_api import async_playwright, Page, Browser, BrowserContext, Playwright
from delivery_scraper.core.config import Settings, settings
from delivery_scraper.core.logger import logger
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Tuple
import asyncio

BROWSER_ARGS = [
    '--disable-blink-features=AutomationControlled',
    '--disable-dev-shm-usage',
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-gpu',
    '--disable-extensions',
]

class BrowserAgent:
    """Owns one Chromium process shared by all requests.

    The process is launched on first use. Every request gets its own
    ``BrowserContext`` so cookies and storage never leak between requests.
    """

    def __init__(self, config: Settings = settings):
        self.config = config
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self.browser is not None and self.browser.is_connected()

    async def start(self) -> Browser:
        """Launch the browser once; concurrent callers wait for the first launch."""
        if self.is_running:
            return self.browser

        async with self._lock:
            if self.is_running:
                return self.browser

            # A crashed browser leaves a driver behind
            await self._stop_driver()
            try:
                self.playwright = await async_playwright().start()
                self.browser = await self.playwright.chromium.launch(
                    headless=self.config.headless,
                    args=BROWSER_ARGS
                )
            except Exception as e:
                logger.error(f"Failed to start browser: {e}")
                await self._stop_driver()
                raise

            logger.info("Browser started", extra={"step": "launch", "status": "success"})
            return self.browser

    async def new_page(self) -> Tuple[BrowserContext, Page]:
        """Create an isolated context and a page with the configured timeouts."""
        browser = await self.start()
        context = await browser.new_context(
            user_agent=self.config.user_agent,
            locale=self.config.locale,
            viewport={'width': 1366, 'height': 900},
        )
        try:
            page = await context.new_page()
            page.set_default_timeout(self.config.default_timeout_ms)
            page.set_default_navigation_timeout(self.config.navigation_timeout_ms)
        except Exception:
            await context.close()
            raise
        return context, page

    @asynccontextmanager
    async def isolated_page(self) -> AsyncIterator[Page]:
        """Yield a page in a fresh context; the context is closed on every exit path."""
        context, page = await self.new_page()
        try:
            yield page
        finally:
            await close_context(context)

    async def _stop_driver(self):
        browser, playwright = self.browser, self.playwright
        self.browser = None
        self.playwright = None
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping playwright: {e}")

    async def close(self):
        """Close the browser process and the Playwright driver."""
        async with self._lock:
            await self._stop_driver()


async def close_context(context: BrowserContext):
    """Close a context, shielding the close from cancellation of the caller."""
    try:
        await asyncio.shield(context.close())
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.warning(f"Error closing browser context: {e}")

# Global instance
browser_agent = BrowserAgent()
