"""Pytest configuration and fixtures."""

import pytest
import asyncio
import os

# Set test environment variables
os.environ["LOG_LEVEL"] = "ERROR"  # Reduce log noise during tests
os.environ["HEADLESS"] = "true"  # Always run headless in tests

from playwright.async_api import TimeoutError as PlaywrightTimeout, Error as PlaywrightError

from delivery_scraper.core.config import Settings
from delivery_scraper.services.browser_agent import BrowserAgent


def card_html(name, href=None, fee_text="", extra=""):
    """One card in the shape the site renders under its test ids."""
    link = f'<a href="{href or "/uae/restaurant/" + name.lower().replace(" ", "-")}">' \
           f'<h3 data-testid="RESTAURANT_NAME">{name}</h3></a>'
    return f'<div data-testid="RESTAURANT_CARD">{link}<span class="delivery">{fee_text}</span>{extra}</div>'


def page_html(*cards):
    return "<html><body><main>" + "".join(cards) + "</main></body></html>"


class FakeResponse:
    def __init__(self, status=200):
        self.status = status
        self.ok = 200 <= status < 300


class FakeElement:
    def __init__(self, visible=True):
        self.visible = visible
        self.calls = []

    async def is_visible(self):
        return self.visible

    async def click(self, **kwargs):
        self.calls.append(("click",))

    async def fill(self, text):
        self.calls.append(("fill", text))

    async def press(self, key):
        self.calls.append(("press", key))


class FakePage:
    """Just enough of a Playwright ``Page`` for the scrape pipeline."""

    def __init__(self, html="", inputs=(), status=200, goto_error=None, goto_delay=0.0,
                 network_idle=True, content_error=None, popups=None):
        self.html = html
        self.inputs = set(inputs)
        self.popups = dict(popups or {})
        self.status = status
        self.goto_error = goto_error
        self.goto_delay = goto_delay
        self.network_idle = network_idle
        self.content_error = content_error
        self.url = "about:blank"
        self.visited = []
        self.waits = []
        self.elements = {}
        self.default_timeout = None
        self.default_navigation_timeout = None

    def set_default_timeout(self, timeout):
        self.default_timeout = timeout

    def set_default_navigation_timeout(self, timeout):
        self.default_navigation_timeout = timeout

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        if self.goto_delay:
            await asyncio.sleep(self.goto_delay)
        if self.goto_error:
            raise self.goto_error
        self.url = url
        return FakeResponse(self.status)

    async def query_selector(self, selector):
        return self.popups.get(selector)

    async def wait_for_selector(self, selector, state=None, timeout=None):
        if selector in self.inputs:
            return self.elements.setdefault(selector, FakeElement())
        raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def wait_for_load_state(self, state, timeout=None):
        self.waits.append(("load_state", state))
        if not self.network_idle:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded")

    async def wait_for_timeout(self, ms):
        self.waits.append(("timeout", ms))

    async def content(self):
        if self.content_error:
            raise self.content_error
        return self.html


class FakeContext:
    def __init__(self, page):
        self.page = page
        self.closed = False
        self.options = {}

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class FakeAgent(BrowserAgent):
    """A ``BrowserAgent`` whose contexts wrap a prepared ``FakePage``."""

    def __init__(self, page, config=None, new_page_error=None):
        super().__init__(config or Settings())
        self.page = page
        self.new_page_error = new_page_error
        self.contexts = []

    async def new_page(self):
        if self.new_page_error:
            raise self.new_page_error
        context = FakeContext(self.page)
        self.contexts.append(context)
        return context, self.page


@pytest.fixture
def test_settings():
    """Settings with short waits so tests don't sleep."""
    return Settings(
        search_probe_timeout_ms=200,
        network_idle_timeout_ms=100,
        settle_delay_ms=50,
        scrape_deadline_seconds=5,
        max_delivery_fee=10,
    )


@pytest.fixture
def navigation_error():
    return PlaywrightError("net::ERR_NAME_NOT_RESOLVED at https://www.talabat.com/uae/restaurants")
