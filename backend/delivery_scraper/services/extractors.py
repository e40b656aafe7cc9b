"""Pull numbers out of free card text.

Every extractor is total: it takes a string (or ``None``) and returns a number
or ``None``. Absence is a normal result, never an exception, and ``0`` is only
returned when the text actually says so (e.g. "Free delivery").
"""

import re
from typing import Optional

CURRENCY_PATTERN = r'(?:AED|KWD|SAR|QAR|BHD|OMR|EGP|JOD|IQD|Dhs?\.?)'

_AMOUNT_RE = re.compile(r'\d+(?:\.\d+)?')
_PERCENT_RE = re.compile(r'(\d+)\s*%')
_DISCOUNT_RE = re.compile(r'(\d+)\s*%\s*off', re.IGNORECASE)
_FEE_BEFORE_RE = re.compile(CURRENCY_PATTERN + r'\s*([\d.,]+)\s*delivery', re.IGNORECASE)
_FEE_AFTER_RE = re.compile(r'delivery\s*(?:fee)?\s*[:-]?\s*' + CURRENCY_PATTERN + r'\s*([\d.,]+)', re.IGNORECASE)
_FREE_DELIVERY_RE = re.compile(r'free\s*delivery', re.IGNORECASE)
_ETA_RANGE_RE = re.compile(r'(\d+)\s*[-–]\s*(\d+)\s*min', re.IGNORECASE)
_ETA_SINGLE_RE = re.compile(r'(\d+)\s*min', re.IGNORECASE)
_RATING_STAR_AFTER_RE = re.compile(r'(\d+(?:\.\d+)?)\s*[★⭐]')
_RATING_STAR_BEFORE_RE = re.compile(r'[★⭐]\ufe0f?\s*(\d+(?:\.\d+)?)')
_RATING_LABEL_RE = re.compile(r'rat(?:ing|ed)\s*[:-]?\s*(\d+(?:\.\d+)?)', re.IGNORECASE)


def _to_float(raw: str) -> Optional[float]:
    cleaned = raw.replace(',', '').rstrip('.')
    try:
        return float(cleaned)
    except ValueError:
        return None


def extract_amount(text: Optional[str]) -> Optional[float]:
    """First run of digits with an optional decimal part, e.g. 'AED 1,250.50' -> 1250.5."""
    if not text:
        return None
    # Drop thousands separators between digits so '1,250' reads as one number
    match = _AMOUNT_RE.search(re.sub(r'(?<=\d),(?=\d{3})', '', text))
    return float(match.group(0)) if match else None


def extract_percentage(text: Optional[str]) -> Optional[int]:
    if not text:
        return None
    match = _PERCENT_RE.search(text)
    return int(match.group(1)) if match else None


def extract_discount_pct(text: Optional[str]) -> Optional[int]:
    """Percentage from an 'N% off' badge."""
    if not text:
        return None
    match = _DISCOUNT_RE.search(text)
    return int(match.group(1)) if match else None


def extract_delivery_fee(text: Optional[str]) -> Optional[float]:
    """Delivery fee from 'AED 7 delivery' / 'Delivery: AED 7'; 'Free delivery' is 0."""
    if not text:
        return None
    match = _FEE_BEFORE_RE.search(text) or _FEE_AFTER_RE.search(text)
    if match:
        fee = _to_float(match.group(1))
        if fee is not None:
            return fee
    if _FREE_DELIVERY_RE.search(text):
        return 0.0
    return None


def extract_eta_minutes(text: Optional[str]) -> Optional[int]:
    """Delivery time in minutes; for a range like '25-35 mins' the upper bound wins."""
    if not text:
        return None
    match = _ETA_RANGE_RE.search(text)
    if match:
        return int(match.group(2))
    match = _ETA_SINGLE_RE.search(text)
    return int(match.group(1)) if match else None


def extract_rating(text: Optional[str]) -> Optional[float]:
    if not text:
        return None
    for pattern in (_RATING_STAR_AFTER_RE, _RATING_STAR_BEFORE_RE, _RATING_LABEL_RE):
        match = pattern.search(text)
        if match:
            rating = _to_float(match.group(1))
            if rating is not None:
                return rating
    return None
