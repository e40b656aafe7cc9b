"""Typed failures surfaced by the scrape pipeline."""

from typing import Any, Dict, Optional


class ScrapeError(Exception):
    """Base class for failures returned to callers as ``{error, message}``."""

    kind = "scrape_error"
    status_code = 500

    def __init__(self, message: str, request_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.request_id = request_id

    def to_dict(self) -> Dict[str, Any]:
        payload = {"error": self.kind, "message": self.message}
        if self.request_id:
            payload["request_id"] = self.request_id
        return payload


class InvalidInput(ScrapeError):
    """A required parameter is missing or empty; no scrape is attempted."""

    kind = "invalid_input"
    status_code = 400


class NavigationFailed(ScrapeError):
    """The target site could not be loaded."""

    kind = "navigation_failed"
    status_code = 502


class DeadlineExceeded(ScrapeError):
    """The whole scrape did not finish within its deadline."""

    kind = "deadline_exceeded"
    status_code = 504


class ExtractionError(ScrapeError):
    kind = "extraction_error"
    status_code = 500
