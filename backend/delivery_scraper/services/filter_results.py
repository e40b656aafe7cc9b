"""Filter extracted listings before they are returned."""

from typing import Iterable, Iterator

from delivery_scraper.models import ListingRecord

def within_fee_cap(record: ListingRecord, max_fee: float) -> bool:
    """Unknown fees pass; known fees must not exceed the cap."""
    return record.delivery_fee is None or record.delivery_fee <= max_fee

def filter_by_delivery_fee(records: Iterable[ListingRecord], max_fee: float) -> Iterator[ListingRecord]:
    """Yield records within the delivery fee cap, preserving order.

    Lazy, so the caller can stop pulling (and building) records once it has enough.
    """
    return (record for record in records if within_fee_cap(record, max_fee))
