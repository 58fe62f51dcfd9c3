"""Scraper system for extracting product records from rendered pages.

This package provides:
- Result types and the extraction strategy interface
- A per-request Playwright fetcher
- Selector-based and AI-assisted extraction strategies
- A factory choosing the strategy per target site, and the pipeline
"""

from .base import (
    ExtractionFailure,
    ExtractionStrategy,
    FailureKind,
    FetchFailure,
    Html,
    ProductRecord,
)
from .fetcher import BrowserFetcher, FetchOptions, WaitCondition
from .factory import ResolvedSite, StrategyFactory, build_strategy_factory
from .pipeline import ScrapePipeline

__all__ = [
    # Result types
    "ExtractionFailure",
    "FailureKind",
    "FetchFailure",
    "Html",
    "ProductRecord",
    # Strategy interface
    "ExtractionStrategy",
    # Fetching
    "BrowserFetcher",
    "FetchOptions",
    "WaitCondition",
    # Factory and pipeline
    "ResolvedSite",
    "StrategyFactory",
    "build_strategy_factory",
    "ScrapePipeline",
]
