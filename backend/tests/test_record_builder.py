"""Tests for building listing records from cards."""

from datetime import datetime, timezone

from bs4 import BeautifulSoup

from conftest import card_html, page_html
from delivery_scraper.services.record_builder import (
    build_record,
    build_records,
    derive_discounted_price,
    normalize_link,
)

BASE_URL = "https://www.talabat.com"

FULL_CARD = """
<div data-testid="RESTAURANT_CARD">
  <a href="/uae/restaurant/123/pizza-palace"><h3 data-testid="RESTAURANT_NAME"> Pizza Palace </h3></a>
  <p class="cuisines">Pizza, Italian</p>
  <span class="min-order-price">AED 100</span>
  <span class="offer">20% off</span>
  <span class="delivery">AED 7 delivery</span>
  <span class="eta">25-35 mins</span>
  <span class="rating">4.5 ★</span>
</div>
"""


def _card(html):
    return BeautifulSoup(html, "html.parser").select_one("[data-testid='RESTAURANT_CARD'], div")


def test_build_record_from_full_card():
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    record = build_record(_card(FULL_CARD), base_url=BASE_URL, now=now)

    assert record.platform == "talabat"
    assert record.restaurant == "Pizza Palace"
    assert record.item == "Pizza, Italian"
    assert record.base_price == 100.0
    assert record.discount_pct == 20
    assert record.discounted_price == 80.0
    assert record.delivery_fee == 7.0
    assert record.eta_min == 35
    assert record.rating == 4.5
    assert record.link == "https://www.talabat.com/uae/restaurant/123/pizza-palace"
    assert record.last_seen == now


def test_card_without_name_is_skipped():
    html = '<div class="restaurant-promo"><span>20% off</span><a href="/uae/offers">Offers</a></div>'

    assert build_record(_card(html), base_url=BASE_URL) is None


def test_card_with_blank_name_is_skipped():
    html = '<div data-testid="RESTAURANT_CARD"><h3 data-testid="RESTAURANT_NAME">   </h3></div>'

    assert build_record(_card(html), base_url=BASE_URL) is None


def test_missing_values_stay_absent():
    record = build_record(_card(card_html("Shawarma Spot")), base_url=BASE_URL)

    assert record.base_price is None
    assert record.discounted_price is None
    assert record.discount_pct is None
    assert record.delivery_fee is None
    assert record.eta_min is None
    assert record.rating is None
    assert record.item == ""


def test_free_delivery_is_zero_fee():
    record = build_record(_card(card_html("Burger Barn", fee_text="Free delivery")), base_url=BASE_URL)

    assert record.delivery_fee == 0.0


def test_rating_from_aria_label():
    extra = '<div class="stars" aria-label="Rating 4.1 out of 5"></div>'

    record = build_record(_card(card_html("Sushi Bar", extra=extra)), base_url=BASE_URL)

    assert record.rating == 4.1


def test_review_count_is_not_a_rating():
    extra = '<span class="rating-count">500+</span>'

    record = build_record(_card(card_html("Grill House", extra=extra)), base_url=BASE_URL)

    assert record.rating is None


def test_review_count_falls_through_to_card_rating():
    extra = '<span class="rating-count">500+</span><span>4.2 ★</span>'

    record = build_record(_card(card_html("Grill House", extra=extra)), base_url=BASE_URL)

    assert record.rating == 4.2


def test_absolute_link_is_kept():
    record = build_record(_card(card_html("Cafe", href="https://example.com/uae/restaurant/9")), base_url=BASE_URL)

    assert record.link == "https://example.com/uae/restaurant/9"


def test_normalize_link():
    assert normalize_link("/uae/restaurant/1", BASE_URL) == "https://www.talabat.com/uae/restaurant/1"
    assert normalize_link("uae/restaurant/1", BASE_URL + "/") == "https://www.talabat.com/uae/restaurant/1"
    assert normalize_link("https://cdn.talabat.com/x", BASE_URL) == "https://cdn.talabat.com/x"
    assert normalize_link("#", BASE_URL) is None
    assert normalize_link("javascript:void(0)", BASE_URL) is None
    assert normalize_link(None, BASE_URL) is None


def test_derive_discounted_price():
    assert derive_discounted_price(100.0, 20) == 80.0
    assert derive_discounted_price(33.33, 15) == 28.33
    assert derive_discounted_price(50.0, 0) == 50.0
    assert derive_discounted_price(50.0, None) == 50.0
    assert derive_discounted_price(None, 20) is None


def test_discounted_price_never_exceeds_base_price():
    for pct in range(1, 101):
        assert derive_discounted_price(59.99, pct) <= 59.99


def test_build_records_stops_at_max():
    soup = BeautifulSoup(page_html(*(card_html(f"Place {i}") for i in range(10))), "html.parser")
    cards = soup.select("[data-testid='RESTAURANT_CARD']")
    consumed = []

    def tracked():
        for card in cards:
            consumed.append(card)
            yield card

    records = build_records(tracked(), max_results=3, base_url=BASE_URL)

    assert [record.restaurant for record in records] == ["Place 0", "Place 1", "Place 2"]
    assert len(consumed) == 3


class BrokenCard:
    name = "div"

    def select_one(self, selector):
        raise RuntimeError("detached element")

    def get_text(self, separator="", strip=False):
        return ""

    def get(self, key, default=None):
        return default


def test_failing_card_is_skipped():
    soup = BeautifulSoup(page_html(card_html("First"), card_html("Second")), "html.parser")
    first, second = soup.select("[data-testid='RESTAURANT_CARD']")

    records = build_records([first, BrokenCard(), second], max_results=5, base_url=BASE_URL)

    assert [record.restaurant for record in records] == ["First", "Second"]


def test_nameless_cards_never_reach_output():
    soup = BeautifulSoup(
        page_html(card_html("Kept"), '<div data-testid="RESTAURANT_CARD"><span>AED 5 delivery</span></div>'),
        "html.parser",
    )

    records = build_records(soup.select("[data-testid='RESTAURANT_CARD']"), max_results=5, base_url=BASE_URL)

    assert [record.restaurant for record in records] == ["Kept"]
