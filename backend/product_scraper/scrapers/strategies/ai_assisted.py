"""AI-assisted extraction strategy.

Delegates interpretation of the HTML to a text-generation service. Used as
the fallback for sites without a maintained selector table: it needs no
selectors, but its output is not reproducible and depends on the service
being reachable.
"""

import json
import math
import re
from typing import Any, Optional

from bs4 import BeautifulSoup, Comment

from product_scraper.core.exceptions import GenerationError
from product_scraper.scrapers.base import (
    DESCRIPTION_PLACEHOLDER,
    ExtractionFailure,
    ExtractionResult,
    ExtractionStrategy,
    FailureKind,
    ProductRecord,
)
from product_scraper.scrapers.utils.generator import TextGenerator
from product_scraper.scrapers.utils.normalizer import (
    clean_price,
    clean_text,
    normalize_currency,
    resolve_url,
)


PROMPT_TEMPLATE = """You are a data extraction engine for e-commerce product pages.
Analyze the HTML below, taken from {url}, and return ONLY one JSON object with these keys:
- "productName": the product name as shown on the page.
- "price": the current selling price as a string of digits only, without currency, spaces or separators.
- "currency": the ISO 4217 currency code of the price. Use "{currency}" if it cannot be determined.
- "descriptionComplete": the full product description as plain text.
- "imageUrl": the absolute URL of the main product image. Omit the key if no absolute URL is available.
If the page is not a product page, return only {{"error": "<short explanation>"}}.
Do not add any commentary or text outside the JSON object.

HTML:
{html}
"""

_CODE_FENCE_RE = re.compile(r"^\s*```[a-zA-Z]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)
_STRIPPED_TAGS = ["style", "noscript", "svg", "iframe"]


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence wrapping the whole response, if any."""
    match = _CODE_FENCE_RE.match(text or "")
    if match:
        return match.group(1).strip()
    return (text or "").strip()


def compact_html(html: str, max_chars: int) -> str:
    """Drop markup that carries no product data and cap the prompt size.

    JSON-LD scripts are kept since they often hold the structured product.
    """
    soup = BeautifulSoup(html, "lxml")
    for script in soup.find_all("script"):
        if script.get("type") != "application/ld+json":
            script.decompose()
    for tag in soup.find_all(_STRIPPED_TAGS):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    compacted = str(soup)
    if max_chars and len(compacted) > max_chars:
        compacted = compacted[:max_chars]
    return compacted


def _coerce_price(value: Any, currency_token: Optional[str]) -> Optional[int]:
    # JSON numbers arrive as int/float; 12500.0 must not become 125000
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value) if value >= 0 else None
    return clean_price(value, currency_token)


class AIAssistedStrategy(ExtractionStrategy):
    """Extracts a product record by prompting a text generator."""

    name = "ai"

    def __init__(
        self,
        generator: TextGenerator,
        currency: str = "XOF",
        currency_token: Optional[str] = "FCFA",
        max_html_chars: int = 200_000,
    ):
        super().__init__()
        self.generator = generator
        self.currency = currency
        self.currency_token = currency_token
        self.max_html_chars = max_html_chars

    def build_prompt(self, html: str, source_url: str) -> str:
        return PROMPT_TEMPLATE.format(
            url=source_url,
            currency=self.currency,
            html=compact_html(html, self.max_html_chars),
        )

    async def extract(self, html: str, source_url: str) -> ExtractionResult:
        prompt = self.build_prompt(html, source_url)
        self.logger.info("generation_requested", url=source_url, prompt_chars=len(prompt))

        try:
            raw = await self.generator.generate(prompt)
        except GenerationError as e:
            self.logger.error("generation_failed", url=source_url, error=e.message)
            return ExtractionFailure(FailureKind.GENERATION_FAILURE, e.message)

        try:
            data = json.loads(strip_code_fences(raw))
        except json.JSONDecodeError as e:
            self.logger.warning("generation_response_malformed", url=source_url, error=str(e))
            return ExtractionFailure(FailureKind.MALFORMED_RESPONSE, str(e))

        if not isinstance(data, dict):
            return ExtractionFailure(FailureKind.MALFORMED_RESPONSE, "expected a JSON object")

        if data.get("error"):
            message = clean_text(data["error"])
            self.logger.info("not_a_product_page", url=source_url, reason=message)
            return ExtractionFailure(FailureKind.NOT_A_PRODUCT_PAGE, message)

        product_name = clean_text(data.get("productName"))
        if not product_name:
            return ExtractionFailure(FailureKind.MISSING_REQUIRED_FIELD, "productName")

        price = _coerce_price(data.get("price"), self.currency_token)
        if price is None:
            return ExtractionFailure(FailureKind.MISSING_REQUIRED_FIELD, "price")

        record = ProductRecord(
            product_name=product_name,
            price=price,
            currency=normalize_currency(data.get("currency"), self.currency),
            description_complete=clean_text(data.get("descriptionComplete")) or DESCRIPTION_PLACEHOLDER,
            image_url=resolve_url(data.get("imageUrl"), source_url),
            product_url=source_url,
        )
        self.logger.info("product_extracted", url=source_url, has_image=bool(record.image_url))
        return record
