"""End-to-end pipeline scenarios with a fake browser and generator."""

from unittest.mock import AsyncMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from product_scraper.scrapers.base import (
    ExtractionFailure,
    ExtractionStrategy,
    FailureKind,
    FetchFailure,
    Html,
    ProductRecord,
)
from product_scraper.scrapers.fetcher import BrowserFetcher
from product_scraper.scrapers.pipeline import ScrapePipeline
from product_scraper.scrapers.strategies import AIAssistedStrategy, SelectorStrategy


URL = "https://shop.test/item/42"


@pytest.fixture
def pipeline(fake_playwright) -> ScrapePipeline:
    fetcher = BrowserFetcher(user_agent="test-agent", playwright_factory=fake_playwright)
    return ScrapePipeline(fetcher)


def _spy_strategy() -> ExtractionStrategy:
    strategy = AsyncMock(spec=ExtractionStrategy)
    strategy.name = "spy"
    return strategy


class TestScrapePipeline:
    """Tests for ScrapePipeline.run()."""

    async def test_selector_extraction_end_to_end(self, pipeline, fake_playwright, selector_set):
        strategy = SelectorStrategy(selector_set, currency="XOF", currency_token="FCFA")

        result = await pipeline.run(URL, strategy)

        assert isinstance(result, ProductRecord)
        assert result.product_name == "Blue Chair"
        assert result.price == 12500
        assert result.currency == "XOF"
        assert result.product_url == URL
        assert result.image_url == "https://shop.test/img/x.jpg"
        assert fake_playwright.browser_close_count == 1

    async def test_navigation_timeout_skips_extraction(self, pipeline, fake_playwright):
        fake_playwright.goto_error = PlaywrightTimeoutError("Timeout 45000ms exceeded.")
        strategy = _spy_strategy()

        result = await pipeline.run(URL, strategy)

        assert isinstance(result, FetchFailure)
        assert result.kind == FailureKind.NAVIGATION_TIMEOUT
        assert strategy.extract.await_count == 0
        assert fake_playwright.browser_close_count == 1

    async def test_ai_not_a_product_page(self, pipeline, make_generator):
        generator = make_generator('```json\n{"error": "not a product page"}\n```')

        result = await pipeline.run(URL, AIAssistedStrategy(generator))

        assert isinstance(result, ExtractionFailure)
        assert result.kind == FailureKind.NOT_A_PRODUCT_PAGE
        assert len(generator.prompts) == 1

    async def test_extraction_failure_is_returned_unchanged(self, pipeline):
        failure = ExtractionFailure(FailureKind.MISSING_REQUIRED_FIELD, "price")
        strategy = _spy_strategy()
        strategy.extract.return_value = failure

        result = await pipeline.run(URL, strategy)

        assert result is failure
        strategy.extract.assert_awaited_once()
        html, source_url = strategy.extract.await_args.args
        assert source_url == URL
        assert "Blue" in html

    async def test_fetch_options_are_forwarded(self):
        fetcher = AsyncMock(spec=BrowserFetcher)
        fetcher.fetch.return_value = FetchFailure(FailureKind.EMPTY_CONTENT, "0 characters")
        options = object()

        result = await ScrapePipeline(fetcher).run(URL, _spy_strategy(), options)

        assert result.kind == FailureKind.EMPTY_CONTENT
        fetcher.fetch.assert_awaited_once_with(URL, options)

    async def test_fetch_html_returns_document(self, pipeline, product_html):
        result = await pipeline.fetch_html(URL)

        assert result == Html(product_html)
