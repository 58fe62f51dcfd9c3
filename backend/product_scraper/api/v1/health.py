"""Health check endpoint."""

from fastapi import APIRouter, Depends

from product_scraper.dependencies import get_strategy_factory
from product_scraper.schemas import HealthCheckResponse
from product_scraper.scrapers.factory import StrategyFactory

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(factory: StrategyFactory = Depends(get_strategy_factory)):
    """Return service health and which extraction strategies are configured.

    No browser is launched here, a health probe must stay cheap.
    """
    return HealthCheckResponse(
        status="ok",
        ai_fallback_enabled=factory.ai_fallback,
        site_profiles=len(factory.profiles),
    )
