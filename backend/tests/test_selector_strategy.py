"""Tests for selector-based extraction."""

import pytest

from product_scraper.scrapers.base import (
    DESCRIPTION_PLACEHOLDER,
    ExtractionFailure,
    FailureKind,
    ProductRecord,
)
from product_scraper.scrapers.site_profiles import SelectorSet
from product_scraper.scrapers.strategies import SelectorStrategy


SOURCE_URL = "https://example.com/p/1"


def _page(body: str, head: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


@pytest.fixture
def strategy(selector_set) -> SelectorStrategy:
    return SelectorStrategy(selector_set, currency="XOF", currency_token="FCFA")


class TestSelectorExtraction:
    """Tests for SelectorStrategy.extract()."""

    async def test_extracts_full_record(self, strategy, product_html):
        result = await strategy.extract(product_html, SOURCE_URL)

        assert isinstance(result, ProductRecord)
        assert result.product_name == "Blue Chair"
        assert result.price == 12500
        assert result.currency == "XOF"
        assert result.description_complete == "Solid wood frame. Blue cotton seat."
        assert result.image_url == "https://example.com/img/x.jpg"
        assert result.product_url == SOURCE_URL

    async def test_missing_name_selector_is_a_failure(self, strategy):
        html = _page('<span class="product-price">12,500 FCFA</span>')

        result = await strategy.extract(html, SOURCE_URL)

        assert result == ExtractionFailure(FailureKind.MISSING_REQUIRED_FIELD, "productName")

    async def test_blank_name_is_a_failure(self, strategy):
        html = _page('<h1 class="product-title">  \n </h1><span class="product-price">500</span>')

        result = await strategy.extract(html, SOURCE_URL)

        assert isinstance(result, ExtractionFailure)
        assert result.detail == "productName"

    async def test_missing_price_is_a_failure(self, strategy):
        html = _page('<h1 class="product-title">Blue Chair</h1><span class="product-price">Sold out</span>')

        result = await strategy.extract(html, SOURCE_URL)

        assert result == ExtractionFailure(FailureKind.MISSING_REQUIRED_FIELD, "price")

    async def test_oversized_price_digits_are_a_failure(self, strategy):
        html = _page(
            '<h1 class="product-title">Blue Chair</h1>'
            f'<span class="product-price">{"1" * 5000}</span>'
        )

        result = await strategy.extract(html, SOURCE_URL)

        assert result == ExtractionFailure(FailureKind.MISSING_REQUIRED_FIELD, "price")

    async def test_lazy_loaded_image_uses_data_attribute(self, strategy):
        html = _page(
            '<h1 class="product-title">Lamp</h1>'
            '<span class="product-price">3 000 FCFA</span>'
            '<img class="product-image" src="/placeholder.gif" data-src="/media/lamp.jpg">'
        )

        result = await strategy.extract(html, SOURCE_URL)

        assert result.image_url == "https://example.com/media/lamp.jpg"

    async def test_image_falls_back_to_src(self, strategy):
        html = _page(
            '<h1 class="product-title">Lamp</h1>'
            '<span class="product-price">3000</span>'
            '<img class="product-image" src="https://cdn.example.com/lamp.jpg">'
        )

        result = await strategy.extract(html, SOURCE_URL)

        assert result.image_url == "https://cdn.example.com/lamp.jpg"

    async def test_invalid_image_is_dropped(self, strategy):
        html = _page(
            '<h1 class="product-title">Lamp</h1><span class="product-price">3000</span>',
            head='<meta property="og:image" content="data:image/png;base64,AAAA">',
        )

        result = await strategy.extract(html, SOURCE_URL)

        assert isinstance(result, ProductRecord)
        assert result.image_url is None

    async def test_meta_description_when_no_container(self, strategy):
        html = _page(
            '<h1 class="product-title">Lamp</h1><span class="product-price">3000</span>',
            head='<meta name="description" content="Desk lamp,\n  warm light.">',
        )

        result = await strategy.extract(html, SOURCE_URL)

        assert result.description_complete == "Desk lamp, warm light."

    async def test_description_placeholder(self, strategy):
        html = _page('<h1 class="product-title">Lamp</h1><span class="product-price">3000</span>')

        result = await strategy.extract(html, SOURCE_URL)

        assert result.description_complete == DESCRIPTION_PLACEHOLDER
        assert result.image_url is None

    async def test_currency_from_page_metadata(self, strategy):
        html = _page(
            '<h1 class="product-title">Lamp</h1><span class="product-price">45</span>',
            head='<meta property="product:price:currency" content="eur">',
        )

        result = await strategy.extract(html, SOURCE_URL)

        assert result.currency == "EUR"

    async def test_price_from_content_attribute(self):
        selectors = SelectorSet(title="h1", price='[itemprop="price"]')
        strategy = SelectorStrategy(selectors)
        html = _page('<h1>Lamp</h1><meta itemprop="price" content="9900"><span>9.900 FCFA</span>')

        result = await strategy.extract(html, SOURCE_URL)

        assert result.price == 9900

    async def test_configured_currency_selector(self):
        selectors = SelectorSet(title="h1", price=".price", currency=".cur")
        strategy = SelectorStrategy(selectors, currency="XOF", currency_token=None)
        html = _page('<h1>Lamp</h1><span class="price">1 200</span><span class="cur">GHS</span>')

        result = await strategy.extract(html, SOURCE_URL)

        assert result.currency == "GHS"
        assert result.price == 1200


class TestProductRecord:
    """Tests for ProductRecord validation and serialization."""

    def test_to_dict_uses_camel_case(self):
        record = ProductRecord(
            product_name="Blue Chair",
            price=12500,
            currency="XOF",
            description_complete="Solid wood.",
            image_url=None,
            product_url="https://shop.test/item/42",
        )

        assert record.to_dict() == {
            "productName": "Blue Chair",
            "price": 12500,
            "currency": "XOF",
            "descriptionComplete": "Solid wood.",
            "imageUrl": None,
            "productUrl": "https://shop.test/item/42",
        }

    def test_requires_product_name(self):
        with pytest.raises(ValueError, match="product_name is required"):
            ProductRecord(
                product_name="",
                price=1,
                currency="XOF",
                description_complete="",
                product_url="https://shop.test/item/42",
            )

    def test_rejects_negative_price(self):
        with pytest.raises(ValueError, match="price must be a non-negative integer"):
            ProductRecord(
                product_name="Chair",
                price=-1,
                currency="XOF",
                description_complete="",
                product_url="https://shop.test/item/42",
            )
