"""FastAPI dependency injection providers."""

from fastapi import Request

from product_scraper.config import settings
from product_scraper.scrapers.factory import StrategyFactory
from product_scraper.scrapers.fetcher import BrowserFetcher
from product_scraper.scrapers.pipeline import ScrapePipeline


def get_strategy_factory(request: Request) -> StrategyFactory:
    """Return the factory built at startup by the application lifespan."""
    return request.app.state.strategy_factory


def get_pipeline() -> ScrapePipeline:
    """Build a pipeline for one request.

    The fetcher launches its own browser per fetch, so nothing here is
    shared between concurrent requests.
    """
    fetcher = BrowserFetcher(
        user_agent=settings.USER_AGENT,
        headless=settings.BROWSER_HEADLESS,
    )
    return ScrapePipeline(fetcher)
