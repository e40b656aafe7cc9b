from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from delivery_scraper.api.rate_limit import RateLimiter
from delivery_scraper.core.errors import ScrapeError
from delivery_scraper.core.logger import logger
from delivery_scraper.models import SearchRequest
from delivery_scraper.services.scrape_service import new_request_id, scrape_service

router = APIRouter()
rate_limiter = RateLimiter()


@router.get("/healthz")
async def healthz():
    return {"ok": True, "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/search")
async def search(
    request: Request,
    query: Optional[str] = None,
    location: Optional[str] = None,
    max_results: Optional[str] = Query(default=None, alias="max"),
):
    """Scrape restaurant listings matching ``query``."""
    client = request.client.host if request.client else "unknown"
    retry_after = rate_limiter.check(client)
    if retry_after is not None:
        return JSONResponse(
            status_code=429,
            content={"error": "rate_limited", "message": "Rate limit exceeded", "retry_after": retry_after},
            headers={"Retry-After": str(retry_after)},
        )

    request_id = new_request_id()
    try:
        search_request = SearchRequest.from_params(query, location, max_results)
        result = await scrape_service.scrape(search_request, request_id=request_id)
    except ScrapeError as e:
        e.request_id = e.request_id or request_id
        logger.warning(f"Search failed: {e.message}", extra={"request_id": request_id, "kind": e.kind})
        return JSONResponse(status_code=e.status_code, content=e.to_dict())

    return result.model_dump(mode="json")
