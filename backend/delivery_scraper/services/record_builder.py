"""Turn located cards into ``ListingRecord`` objects."""

from datetime import datetime, timezone
from itertools import islice
from typing import Any, Iterable, Iterator, List, Optional, Protocol
from urllib.parse import urljoin

from delivery_scraper.core.config import settings
from delivery_scraper.core.logger import logger
from delivery_scraper.models import ListingRecord
from delivery_scraper.services.extractors import (
    extract_amount,
    extract_delivery_fee,
    extract_discount_pct,
    extract_eta_minutes,
    extract_rating,
)
from delivery_scraper.services.site_selectors import get_selectors


class CardElement(Protocol):
    """The slice of the BeautifulSoup ``Tag`` API the builder relies on."""

    name: str

    def select_one(self, selector: str) -> Optional["CardElement"]: ...

    def get_text(self, separator: str = "", strip: bool = False) -> str: ...

    def get(self, key: str, default: Any = None) -> Any: ...


def _first_text(card: CardElement, selectors: List[str]) -> str:
    for selector in selectors:
        element = card.select_one(selector)
        if element is None:
            continue
        text = element.get_text(" ", strip=True)
        if text:
            return text
    return ""


def _first_attr_text(card: CardElement, selectors: List[str], attr: str) -> str:
    for selector in selectors:
        element = card.select_one(selector)
        if element is not None and element.get(attr):
            return str(element.get(attr))
    return ""


def normalize_link(href: Optional[str], base_url: str) -> Optional[str]:
    """Make a card href absolute; root-relative paths get the site origin."""
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith(("#", "javascript:", "mailto:", "tel:")):
        return None
    if href.startswith(("http://", "https://")):
        return href
    return urljoin(base_url.rstrip("/") + "/", href)


def _card_href(card: CardElement) -> Optional[str]:
    if card.name == "a" and card.get("href"):
        return card.get("href")
    for selector in get_selectors("restaurant_link"):
        element = card.select_one(selector)
        if element is not None and element.get("href"):
            return element.get("href")
    return None


def derive_discounted_price(base_price: Optional[float], discount_pct: Optional[int]) -> Optional[float]:
    """Price after discount, rounded to 2 decimals; without a discount it is the base price."""
    if base_price is None:
        return None
    if not discount_pct:
        return base_price
    return round(base_price * (100 - discount_pct) / 100, 2)


def build_record(
    card: CardElement,
    base_url: str = settings.base_url,
    now: Optional[datetime] = None,
) -> Optional[ListingRecord]:
    """
    Build a record from one card.

    Returns None when the card has no display name: broad selectors
    sometimes match elements that are not restaurant cards.
    """
    restaurant = _first_text(card, get_selectors("restaurant_name"))
    if not restaurant:
        return None

    card_text = card.get_text(" ", strip=True)

    base_price = extract_amount(_first_text(card, get_selectors("restaurant_price")))
    discount_pct = extract_discount_pct(card_text)
    if discount_pct is not None and discount_pct > 100:
        discount_pct = None

    rating_text = (
        _first_text(card, get_selectors("restaurant_rating"))
        or _first_attr_text(card, get_selectors("restaurant_rating"), "aria-label")
    )
    rating = extract_rating(rating_text)
    if rating is None and rating_text:
        # Rating badges often hold a bare number such as "4.3"; a review
        # count like "500+" is not a rating
        bare = extract_amount(rating_text)
        if bare is not None and bare <= 5:
            rating = bare
    if rating is None:
        rating = extract_rating(card_text)

    return ListingRecord(
        platform=settings.platform,
        restaurant=restaurant,
        item=_first_text(card, get_selectors("restaurant_item")),
        base_price=base_price,
        discounted_price=derive_discounted_price(base_price, discount_pct),
        discount_pct=discount_pct,
        delivery_fee=extract_delivery_fee(card_text),
        eta_min=extract_eta_minutes(card_text),
        rating=rating,
        link=normalize_link(_card_href(card), base_url),
        last_seen=now or datetime.now(timezone.utc),
    )


def iter_records(
    cards: Iterable[CardElement],
    base_url: str = settings.base_url,
    request_id: Optional[str] = None,
) -> Iterator[ListingRecord]:
    """Lazily build records, skipping nameless cards and cards that fail to parse."""
    now = datetime.now(timezone.utc)
    for index, card in enumerate(cards):
        try:
            record = build_record(card, base_url=base_url, now=now)
        except Exception as e:
            logger.warning(
                f"Skipping card {index}: {e}",
                extra={"request_id": request_id, "step": "build_record"},
                exc_info=True
            )
            continue

        if record is not None:
            yield record


def build_records(
    cards: Iterable[CardElement],
    max_results: int,
    base_url: str = settings.base_url,
    request_id: Optional[str] = None,
) -> List[ListingRecord]:
    """Build at most ``max_results`` records; no card past the last one is parsed."""
    if max_results <= 0:
        return []
    return list(islice(iter_records(cards, base_url, request_id), max_results))
