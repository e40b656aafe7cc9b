"""Edge case handlers for browser automation."""

from playwright.async_api import Page, TimeoutError as PlaywrightTimeout, Error as PlaywrightError
from delivery_scraper.core.logger import logger
from typing import Optional, Any, Tuple

class EdgeCaseHandler:
    """Handles common edge cases in browser automation."""

    @staticmethod
    async def wait_for_network_idle(page: Page, timeout: int = 5000) -> dict:
        """
        Wait for network to become idle (no requests for a period).

        Falls back gracefully if network never becomes idle: delivery sites
        keep polling in the background, so a timeout here is expected.
        """
        try:
            await page.wait_for_load_state('networkidle', timeout=timeout)
            logger.debug("Network became idle")
            return {"status": "success", "waited": True}
        except PlaywrightTimeout:
            logger.debug(f"Network didn't become idle within {timeout}ms, continuing anyway")
            return {"status": "success", "waited": False, "note": "Network timeout, but continuing"}
        except PlaywrightError as e:
            logger.warning(f"Error waiting for network idle: {e}")
            return {"status": "success", "waited": False, "error": str(e)}

    @staticmethod
    async def settle(page: Page, delay_ms: int):
        """Fixed pause so client-side rendering can finish painting."""
        if delay_ms > 0:
            await page.wait_for_timeout(delay_ms)

    @staticmethod
    async def handle_popup(page: Page) -> bool:
        """
        Dismiss a cookie banner or location modal covering the page.

        Returns True if something was closed.
        """
        popup_selectors = [
            # Cookie consent
            "#onetrust-accept-btn-handler",
            "button:has-text('Accept')",
            "button:has-text('Got it')",
            "[aria-label*='cookie' i] button",

            # Close buttons for modals
            "button[aria-label*='close' i]",
            "[data-testid='close-button']",
        ]

        for selector in popup_selectors:
            try:
                element = await page.query_selector(selector)
                if element and await element.is_visible():
                    await element.click(timeout=1000)
                    logger.debug(f"Closed popup with selector: {selector}")
                    return True
            except PlaywrightError:
                continue

        return False

    @staticmethod
    async def wait_for_selector_with_fallbacks(
        page: Page,
        selectors: list,
        timeout: int = 5000,
        state: str = "visible"
    ) -> Tuple[Optional[str], Optional[Any]]:
        """
        Wait for any of multiple selectors to appear.

        ``timeout`` is the probing window shared by all selectors, not a
        per-selector budget.

        Returns:
            (matching selector, element handle), or (None, None)
        """
        if not selectors:
            return None, None

        per_selector = max(timeout // len(selectors), 100)
        for selector in selectors:
            try:
                element = await page.wait_for_selector(selector, state=state, timeout=per_selector)
                if element:
                    logger.debug(f"Found element with selector: {selector}", extra={"selector": selector})
                    return selector, element
            except PlaywrightTimeout:
                continue
            except PlaywrightError as e:
                logger.warning(f"Error with selector {selector}: {e}")
                continue

        return None, None
