"""Selector-based extraction strategy.

Reads product fields from the rendered document with CSS selectors taken
from the site's profile. The strategy itself knows no site: onboarding a
new shop means adding a selector table, not code.
"""

from typing import Optional

from bs4 import BeautifulSoup, Tag

from product_scraper.scrapers.base import (
    DESCRIPTION_PLACEHOLDER,
    ExtractionFailure,
    ExtractionResult,
    ExtractionStrategy,
    FailureKind,
    ProductRecord,
)
from product_scraper.scrapers.site_profiles import SelectorSet
from product_scraper.scrapers.utils.normalizer import (
    clean_price,
    clean_text,
    normalize_currency,
    resolve_url,
)


_CURRENCY_META_SELECTORS = (
    'meta[property="product:price:currency"]',
    'meta[property="og:price:currency"]',
    '[itemprop="priceCurrency"]',
)


class SelectorStrategy(ExtractionStrategy):
    """Extracts a product record with a site's CSS selector table."""

    name = "selector"

    def __init__(
        self,
        selectors: SelectorSet,
        currency: str = "XOF",
        currency_token: Optional[str] = "FCFA",
    ):
        super().__init__()
        self.selectors = selectors
        self.currency = currency
        self.currency_token = currency_token

    async def extract(self, html: str, source_url: str) -> ExtractionResult:
        soup = BeautifulSoup(html, "lxml")

        product_name = clean_text(self._select_text(soup, self.selectors.title))
        if not product_name:
            self.logger.warning("required_field_missing", field="productName", url=source_url)
            return ExtractionFailure(FailureKind.MISSING_REQUIRED_FIELD, "productName")

        price = clean_price(self._select_text(soup, self.selectors.price), self.currency_token)
        if price is None:
            self.logger.warning("required_field_missing", field="price", url=source_url)
            return ExtractionFailure(FailureKind.MISSING_REQUIRED_FIELD, "price")

        record = ProductRecord(
            product_name=product_name,
            price=price,
            currency=self._extract_currency(soup),
            description_complete=self._extract_description(soup),
            image_url=resolve_url(self._extract_image(soup), source_url),
            product_url=source_url,
        )
        self.logger.info("product_extracted", url=source_url, has_image=bool(record.image_url))
        return record

    @staticmethod
    def _select_text(soup: BeautifulSoup, selector: Optional[str]) -> Optional[str]:
        """Text of the first match, preferring a ``content`` attribute (meta/itemprop tags)."""
        if not selector:
            return None
        elem = soup.select_one(selector)
        if elem is None:
            return None
        content = elem.get("content")
        if content:
            return content
        return elem.get_text(" ", strip=True)

    @staticmethod
    def _meta_content(soup: BeautifulSoup, selector: str) -> Optional[str]:
        elem = soup.select_one(selector)
        if isinstance(elem, Tag):
            return elem.get("content")
        return None

    def _extract_image(self, soup: BeautifulSoup) -> Optional[str]:
        """Open Graph image first, then the site image with its lazy-load attribute."""
        og_image = clean_text(self._meta_content(soup, 'meta[property="og:image"]'))
        if og_image:
            return og_image

        if not self.selectors.image:
            return None
        img = soup.select_one(self.selectors.image)
        if img is None:
            return None
        return img.get(self.selectors.image_attribute) or img.get("src")

    def _extract_description(self, soup: BeautifulSoup) -> str:
        description = clean_text(self._select_text(soup, self.selectors.description))
        if not description:
            description = clean_text(self._meta_content(soup, 'meta[name="description"]'))
        return description or DESCRIPTION_PLACEHOLDER

    def _extract_currency(self, soup: BeautifulSoup) -> str:
        raw = self._select_text(soup, self.selectors.currency)
        if not raw:
            for selector in _CURRENCY_META_SELECTORS:
                raw = self._select_text(soup, selector)
                if raw:
                    break
        return normalize_currency(raw, self.currency)
