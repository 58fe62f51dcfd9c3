"""Scrape pipeline orchestration.

Connects the browser fetcher with an extraction strategy. The flow per
request is strictly linear: fetch -> extract -> return. Failures from
either stage are passed through unchanged.
"""

from typing import Optional, Union

import structlog

from product_scraper.scrapers.base import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionStrategy,
    FetchFailure,
    FetchResult,
)
from product_scraper.scrapers.fetcher import BrowserFetcher, FetchOptions

logger = structlog.get_logger(__name__)


class ScrapePipeline:
    """Runs one fetch followed by one extraction."""

    def __init__(self, fetcher: BrowserFetcher):
        self.fetcher = fetcher
        self.logger = logger.bind(service="scrape_pipeline")

    async def fetch_html(self, url: str, fetch_options: Optional[FetchOptions] = None) -> FetchResult:
        """Fetch rendered HTML only, without extraction."""
        self.logger.info("fetching_html", url=url)
        return await self.fetcher.fetch(url, fetch_options)

    async def run(
        self,
        url: str,
        strategy: ExtractionStrategy,
        fetch_options: Optional[FetchOptions] = None,
    ) -> Union[ExtractionResult, FetchFailure]:
        """Fetch a product page and extract its record.

        Args:
            url: Absolute product page URL
            strategy: Extraction strategy chosen for the site
            fetch_options: Wait and filtering policy for the fetch

        Returns:
            ProductRecord, ExtractionFailure or FetchFailure
        """
        self.logger.info("pipeline_started", url=url, strategy=strategy.name)

        fetched = await self.fetcher.fetch(url, fetch_options)
        if isinstance(fetched, FetchFailure):
            self.logger.warning("pipeline_fetch_failed", url=url, kind=fetched.kind.value)
            return fetched

        result = await strategy.extract(fetched.content, url)

        if isinstance(result, ExtractionFailure):
            self.logger.warning("pipeline_extraction_failed", url=url, kind=result.kind.value)
        else:
            self.logger.info("pipeline_complete", url=url, strategy=strategy.name)
        return result
