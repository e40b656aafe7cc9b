"""Drive the site's own search box, or fall back to a search URL."""

from dataclasses import dataclass
from urllib.parse import quote_plus

from playwright.async_api import Page, Error as PlaywrightError

from delivery_scraper.core.config import Settings, settings as default_settings
from delivery_scraper.core.errors import NavigationFailed
from delivery_scraper.core.logger import log_step
from delivery_scraper.services.edge_case_handlers import EdgeCaseHandler
from delivery_scraper.services.site_selectors import get_selectors


@dataclass(frozen=True)
class SearchOutcome:
    method: str  # "input" or "direct_url"
    url: str


def build_search_url(query: str, config: Settings = default_settings) -> str:
    return f"{config.restaurants_url}?search={quote_plus(query)}"


async def _goto(page: Page, url: str, config: Settings, request_id: str = None):
    try:
        response = await page.goto(url, wait_until="domcontentloaded", timeout=config.navigation_timeout_ms)
    except PlaywrightError as e:
        log_step("navigate", request_id=request_id, url=url, status="error")
        raise NavigationFailed(f"Could not load {url}: {e}", request_id=request_id) from e

    # Local files and about: pages have no response
    if response is not None and not response.ok:
        log_step("navigate", request_id=request_id, url=url, status="error")
        raise NavigationFailed(f"{url} answered with HTTP {response.status}", request_id=request_id)

    log_step("navigate", request_id=request_id, url=url, status="success")


async def wait_for_results(page: Page, config: Settings = default_settings):
    """Best-effort wait: network quiescence, then a fixed settle delay."""
    await EdgeCaseHandler.wait_for_network_idle(page, timeout=config.network_idle_timeout_ms)
    await EdgeCaseHandler.settle(page, config.settle_delay_ms)


async def trigger_search(
    page: Page,
    query: str,
    config: Settings = default_settings,
    request_id: str = None
) -> SearchOutcome:
    """
    Get the page to a results view for ``query``.

    Tries the landing page's search input first; if none shows up within the
    probing window, navigates straight to the search URL instead.

    Raises:
        NavigationFailed: if the site cannot be loaded at all
    """
    await _goto(page, config.restaurants_url, config, request_id)
    await EdgeCaseHandler.handle_popup(page)

    selector, element = await EdgeCaseHandler.wait_for_selector_with_fallbacks(
        page,
        get_selectors("search_input"),
        timeout=config.search_probe_timeout_ms,
    )

    if element is not None:
        try:
            await element.click()
            await element.fill(query)
            await element.press("Enter")
        except PlaywrightError:
            log_step("search", request_id=request_id, selector=selector, status="error")
            element = None

    if element is not None:
        log_step("search", request_id=request_id, selector=selector, method="input", status="success")
        outcome = SearchOutcome(method="input", url=page.url)
    else:
        search_url = build_search_url(query, config)
        await _goto(page, search_url, config, request_id)
        log_step("search", request_id=request_id, url=search_url, method="direct_url", status="success")
        outcome = SearchOutcome(method="direct_url", url=search_url)

    await wait_for_results(page, config)
    return outcome
