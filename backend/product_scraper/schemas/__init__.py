"""Pydantic schemas for the product scraper API.

All request/response models are defined here for easy import.
"""

from product_scraper.schemas.scrape import ProductData, ScrapeRequest, ScrapeResponse
from product_scraper.schemas.health import HealthCheckResponse

__all__ = [
    "ScrapeRequest",
    "ScrapeResponse",
    "ProductData",
    "HealthCheckResponse",
]
