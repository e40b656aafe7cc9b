"""Data models for scraped listings and search payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from delivery_scraper.core.config import settings
from delivery_scraper.core.errors import InvalidInput


class ListingRecord(BaseModel):
    """One restaurant card as it appeared on the results page."""

    model_config = ConfigDict(frozen=True)

    platform: str = "talabat"
    restaurant: str
    item: str = ""
    base_price: Optional[float] = None
    discounted_price: Optional[float] = None
    discount_pct: Optional[int] = None
    delivery_fee: Optional[float] = Field(default=None, ge=0)
    eta_min: Optional[int] = None
    rating: Optional[float] = None
    link: Optional[str] = None
    last_seen: datetime

    @field_validator("restaurant")
    @classmethod
    def _restaurant_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("restaurant name is required")
        return value


class SearchRequest(BaseModel):
    """Validated scrape parameters."""

    query: str
    location: str
    max_results: int

    @classmethod
    def from_params(
        cls,
        query: Optional[str],
        location: Optional[str] = None,
        max_results: Any = None,
    ) -> "SearchRequest":
        """Build a request from raw query-string values, clamping ``max_results``."""
        query = (query or "").strip()
        if not query:
            raise InvalidInput("Missing required parameter: query")

        location = (location or "").strip() or settings.default_location

        try:
            # "3.5" truncates to 3
            limit = int(float(max_results)) if max_results not in (None, "") else settings.default_max_results
        except (TypeError, ValueError, OverflowError):
            limit = settings.default_max_results
        limit = max(1, min(limit, settings.max_results_limit))

        return cls(query=query, location=location, max_results=limit)


class SearchMeta(BaseModel):
    request_id: str
    duration_ms: int
    search_method: Optional[str] = None
    card_strategy: Optional[str] = None


class SearchResponse(BaseModel):
    query: str
    location: str
    count: int
    items: List[ListingRecord]
    meta: SearchMeta


class EmptySearchResponse(BaseModel):
    """Scrape completed without technical failure but nothing matched."""

    message: str = "No restaurants found. Try a different query or location."
    items: List[ListingRecord] = Field(default_factory=list)
    meta: dict
