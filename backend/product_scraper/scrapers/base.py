"""Base extraction strategy interface and result types.

Every stage of the pipeline returns a value rather than raising:
- BrowserFetcher returns ``Html`` or ``FetchFailure``
- Extraction strategies return ``ProductRecord`` or ``ExtractionFailure``
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

import structlog


DESCRIPTION_PLACEHOLDER = "No description available."


class FailureKind(str, Enum):
    """Failure taxonomy shared by fetch and extraction stages."""

    LAUNCH_FAILURE = "LaunchFailure"
    NAVIGATION_TIMEOUT = "NavigationTimeout"
    NAVIGATION_FAILURE = "NavigationFailure"
    SELECTOR_NOT_FOUND = "SelectorNotFound"
    EMPTY_CONTENT = "EmptyContent"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    MALFORMED_RESPONSE = "MalformedResponse"
    NOT_A_PRODUCT_PAGE = "NotAProductPage"
    GENERATION_FAILURE = "GenerationFailure"
    CONFIGURATION_FAULT = "ConfigurationFault"


# Human-readable messages returned to API callers
_FAILURE_MESSAGES: Dict[FailureKind, str] = {
    FailureKind.LAUNCH_FAILURE: "Unable to start the browser for scraping",
    FailureKind.NAVIGATION_TIMEOUT: "The page did not finish loading in time",
    FailureKind.NAVIGATION_FAILURE: "The page could not be loaded",
    FailureKind.SELECTOR_NOT_FOUND: "Expected page content never appeared",
    FailureKind.EMPTY_CONTENT: "The fetched page content is empty",
    FailureKind.MISSING_REQUIRED_FIELD: "A required product field could not be extracted",
    FailureKind.MALFORMED_RESPONSE: "The extraction service returned an unreadable response",
    FailureKind.NOT_A_PRODUCT_PAGE: "The page does not describe a product",
    FailureKind.GENERATION_FAILURE: "The extraction service is unavailable",
    FailureKind.CONFIGURATION_FAULT: "Scraping is not configured for this site",
}


@dataclass(frozen=True)
class Failure:
    """Base failure value carrying a kind and an optional detail."""

    kind: FailureKind
    detail: str = ""

    @property
    def message(self) -> str:
        """Message suitable for the ``{success: false, message}`` envelope."""
        base = _FAILURE_MESSAGES[self.kind]
        return f"{base}: {self.detail}" if self.detail else base


@dataclass(frozen=True)
class FetchFailure(Failure):
    """The browser could not produce usable HTML."""


@dataclass(frozen=True)
class ExtractionFailure(Failure):
    """HTML was fetched but no product record could be built from it."""


@dataclass(frozen=True)
class Html:
    """Successfully fetched HTML payload."""

    content: str

    def __post_init__(self):
        """Validate data after initialization."""
        if not self.content:
            raise ValueError("content is required")


@dataclass(frozen=True)
class ProductRecord:
    """Normalized product data structure returned by all strategies."""

    product_name: str
    price: Optional[int]
    currency: str
    description_complete: str
    product_url: str
    image_url: Optional[str] = None

    def __post_init__(self):
        """Validate data after initialization."""
        if not self.product_name:
            raise ValueError("product_name is required")
        if self.price is not None and self.price < 0:
            raise ValueError("price must be a non-negative integer")
        if not self.product_url:
            raise ValueError("product_url is required")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase field names of the public API."""
        return {
            "productName": self.product_name,
            "price": self.price,
            "currency": self.currency,
            "descriptionComplete": self.description_complete,
            "imageUrl": self.image_url,
            "productUrl": self.product_url,
        }


FetchResult = Union[Html, FetchFailure]
ExtractionResult = Union[ProductRecord, ExtractionFailure]


class ExtractionStrategy(ABC):
    """Abstract base class for all extraction strategies.

    A strategy turns rendered HTML into a ProductRecord. Strategies are
    selected per target site by configuration (see StrategyFactory) and
    hold no state between calls.
    """

    name: str = ""  # Must be overridden in subclass (e.g., "selector", "ai")

    def __init__(self):
        self.logger = structlog.get_logger(strategy=self.name)

    @abstractmethod
    async def extract(self, html: str, source_url: str) -> ExtractionResult:
        """Build a product record from HTML.

        Args:
            html: Rendered HTML of the product page
            source_url: URL the HTML was fetched from

        Returns:
            ProductRecord, or ExtractionFailure describing why none was built
        """
        pass
