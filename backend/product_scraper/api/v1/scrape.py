"""Scrape endpoint.

Thin HTTP wrapper around the scrape pipeline:

  1. Validate the URL (400 when missing or not an absolute http(s) URL)
  2. Resolve the extraction strategy for the site from configuration
  3. Fetch the page and extract the product record (or return the HTML)
  4. Map any failure value to ``{success: false, message}`` with HTTP 500

Callers always receive the JSON envelope, never a raw trace.
"""

from urllib.parse import urlparse

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from product_scraper.config import settings
from product_scraper.dependencies import get_pipeline, get_strategy_factory
from product_scraper.schemas.scrape import ProductData, ScrapeRequest, ScrapeResponse
from product_scraper.scrapers.base import Failure, Html
from product_scraper.scrapers.factory import StrategyFactory
from product_scraper.scrapers.pipeline import ScrapePipeline

router = APIRouter()
logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error_response(status_code: int, message: str) -> JSONResponse:
    body = ScrapeResponse(success=False, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _is_absolute_http_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def _failure_response(failure: Failure) -> JSONResponse:
    logger.error("scrape_failed", kind=failure.kind.value, detail=failure.detail)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, failure.message)


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------


@router.post("/scrape", response_model=ScrapeResponse, response_model_exclude_unset=True)
async def scrape(
    payload: ScrapeRequest,
    factory: StrategyFactory = Depends(get_strategy_factory),
    pipeline: ScrapePipeline = Depends(get_pipeline),
):
    """Fetch a product page and return its record or its rendered HTML."""
    url = (payload.url or "").strip()
    if not url:
        logger.warning("scrape_request_without_url")
        return _error_response(status.HTTP_400_BAD_REQUEST, "URL is required.")
    if not _is_absolute_http_url(url):
        logger.warning("scrape_request_invalid_url", url=url)
        return _error_response(status.HTTP_400_BAD_REQUEST, "URL must be an absolute http(s) URL.")

    mode = payload.mode or settings.DEFAULT_MODE
    logger.info("scrape_request", url=url, mode=mode)

    try:
        if mode == "html":
            result = await pipeline.fetch_html(url, factory.fetch_options_for(url))
        else:
            resolved = factory.resolve(url)
            if isinstance(resolved, Failure):
                return _failure_response(resolved)
            result = await pipeline.run(url, resolved.strategy, resolved.fetch_options)
    except Exception as e:
        logger.error("scrape_unhandled_error", url=url, error=str(e), exc_info=True)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Server error: {e}")

    if isinstance(result, Failure):
        return _failure_response(result)

    if isinstance(result, Html):
        logger.info("scrape_succeeded", url=url, mode=mode, length=len(result.content))
        return ScrapeResponse(success=True, html=result.content)

    logger.info("scrape_succeeded", url=url, mode=mode, product=result.product_name)
    return ScrapeResponse(success=True, data=ProductData(**result.to_dict()))
