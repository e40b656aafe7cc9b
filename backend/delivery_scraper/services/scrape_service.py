"""Run one scrape: search, snapshot the rendered page, extract, filter."""

import asyncio
import random
import string
import time
from itertools import islice
from typing import List, Tuple, Union

from bs4 import BeautifulSoup
from playwright.async_api import Page, Error as PlaywrightError

from delivery_scraper.core.config import Settings, settings
from delivery_scraper.core.errors import DeadlineExceeded, ExtractionError, ScrapeError
from delivery_scraper.core.logger import logger, log_step
from delivery_scraper.models import EmptySearchResponse, ListingRecord, SearchMeta, SearchRequest, SearchResponse
from delivery_scraper.services.browser_agent import BrowserAgent, browser_agent
from delivery_scraper.services.card_locator import locate_cards
from delivery_scraper.services.filter_results import filter_by_delivery_fee
from delivery_scraper.services.record_builder import iter_records
from delivery_scraper.services.search_trigger import SearchOutcome, trigger_search

ScrapeResult = Union[SearchResponse, EmptySearchResponse]


def new_request_id() -> str:
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def extract_listings(
    html: str,
    max_results: int,
    max_fee: float,
    config: Settings = settings,
    request_id: str = None
) -> Tuple[str, List[ListingRecord]]:
    """
    Parse a rendered page snapshot into at most ``max_results`` listings.

    Records over the fee cap are dropped before they count towards
    ``max_results``, and no card is parsed once enough records are collected.

    Returns:
        (name of the card strategy used, records)
    """
    document = BeautifulSoup(html, "html.parser")
    strategy, cards = locate_cards(document, config.card_scan_limit)
    records = iter_records(cards, base_url=config.base_url, request_id=request_id)
    return strategy, list(islice(filter_by_delivery_fee(records, max_fee), max_results))


class ScrapeService:
    """Orchestrates one scrape per request against the shared browser."""

    def __init__(self, agent: BrowserAgent = browser_agent, config: Settings = settings):
        self.agent = agent
        self.config = config

    async def scrape(self, request: SearchRequest, request_id: str = None) -> ScrapeResult:
        """
        Scrape listings for ``request`` within the configured deadline.

        Raises:
            NavigationFailed: the site could not be loaded
            DeadlineExceeded: the scrape did not finish in time
            ExtractionError: parsing the page failed unexpectedly
        """
        request_id = request_id or new_request_id()
        started = time.monotonic()
        logger.info(
            f"Search request started: '{request.query}'",
            extra={"request_id": request_id, "step": "start"}
        )

        try:
            outcome, strategy, items = await asyncio.wait_for(
                self._run(request, request_id, started),
                timeout=self.config.scrape_deadline_seconds
            )
        except asyncio.TimeoutError:
            log_step("scrape", request_id=request_id, kind=DeadlineExceeded.kind,
                     duration_ms=_elapsed_ms(started), status="error")
            raise DeadlineExceeded(
                f"Scrape did not finish within {self.config.scrape_deadline_seconds:g}s",
                request_id=request_id
            )
        except ScrapeError:
            raise
        except Exception as e:
            log_step("scrape", request_id=request_id, kind=ExtractionError.kind,
                     duration_ms=_elapsed_ms(started), status="error")
            logger.error(f"Scraping failed: {e}", extra={"request_id": request_id}, exc_info=True)
            raise ExtractionError(f"Scraping failed: {e}", request_id=request_id) from e

        duration_ms = _elapsed_ms(started)
        log_step("scrape", request_id=request_id, count=len(items), duration_ms=duration_ms, status="success")

        if not items:
            return EmptySearchResponse(meta={
                "query": request.query,
                "location": request.location,
                "duration_ms": duration_ms,
                "request_id": request_id,
            })

        return SearchResponse(
            query=request.query,
            location=request.location,
            count=len(items),
            items=items,
            meta=SearchMeta(
                request_id=request_id,
                duration_ms=duration_ms,
                search_method=outcome.method,
                card_strategy=strategy,
            )
        )

    async def _run(
        self,
        request: SearchRequest,
        request_id: str,
        started: float
    ) -> Tuple[SearchOutcome, str, List[ListingRecord]]:
        async with self.agent.isolated_page() as page:
            log_step("context", request_id=request_id, duration_ms=_elapsed_ms(started), status="success")
            outcome = await trigger_search(page, request.query, self.config, request_id)
            html = await self._snapshot(page, request_id)

        try:
            # Parsing runs off the event loop so the deadline can abandon it
            strategy, items = await asyncio.to_thread(
                extract_listings,
                html,
                request.max_results,
                self.config.max_delivery_fee,
                self.config,
                request_id
            )
        except Exception as e:
            logger.error(
                f"Extraction failed: {e}",
                extra={"request_id": request_id, "step": "extract", "kind": ExtractionError.kind},
                exc_info=True
            )
            raise ExtractionError(f"Failed to parse results page: {e}", request_id=request_id) from e

        log_step("extract", request_id=request_id, strategy=strategy, count=len(items),
                 duration_ms=_elapsed_ms(started), status="success")
        return outcome, strategy, items

    async def _snapshot(self, page: Page, request_id: str) -> str:
        """Serialize the live, client-rendered DOM."""
        try:
            return await page.content()
        except PlaywrightError as e:
            logger.error(
                f"Could not read rendered page: {e}",
                extra={"request_id": request_id, "step": "snapshot"},
                exc_info=True
            )
            raise ExtractionError(f"Could not read rendered page: {e}", request_id=request_id) from e


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


scrape_service = ScrapeService()
