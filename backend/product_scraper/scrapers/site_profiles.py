"""Per-site extraction profiles loaded from configuration.

The profile table is a JSON object mapping a host to its profile:

    {
      "shop.test": {
        "strategy": "selector",
        "currency": "XOF",
        "selectors": {"title": "h1.product-title", "price": ".price"},
        "fetch": {"wait_until": "domcontentloaded", "timeout_tier": "slow"}
      }
    }
"""

import json
import re
from pathlib import Path
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from product_scraper.core.exceptions import ConfigurationError
from product_scraper.scrapers.fetcher import TIMEOUT_TIERS


class SelectorSet(BaseModel):
    """CSS selectors locating product fields on one site."""

    title: str = Field(..., min_length=1, examples=["h1.product-title"])
    price: str = Field(..., min_length=1, examples=[".product-price"])
    image: Optional[str] = Field(None, description="Fallback when og:image is absent")
    image_attribute: str = Field(
        "data-src",
        description="Attribute holding the real source of lazy-loaded images",
    )
    description: Optional[str] = None
    currency: Optional[str] = None


class FetchProfile(BaseModel):
    """Per-site overrides of the default fetch options."""

    wait_until: Optional[Literal["networkidle", "domcontentloaded"]] = None
    timeout_ms: Optional[int] = Field(None, gt=0)
    timeout_tier: Optional[str] = None
    wait_for_selector: Optional[str] = None
    selector_timeout_ms: Optional[int] = Field(None, gt=0)
    block_resources: Optional[bool] = None
    body_only: Optional[bool] = None

    @field_validator("timeout_tier")
    @classmethod
    def check_tier(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in TIMEOUT_TIERS:
            raise ValueError(f"timeout_tier must be one of {sorted(TIMEOUT_TIERS)}")
        return v

    def resolved_timeout_ms(self) -> Optional[int]:
        """Explicit milliseconds win over a named tier."""
        if self.timeout_ms is not None:
            return self.timeout_ms
        if self.timeout_tier is not None:
            return TIMEOUT_TIERS[self.timeout_tier]
        return None


class SiteProfile(BaseModel):
    """How one target site is fetched and extracted."""

    strategy: Literal["selector", "ai"] = "selector"
    selectors: Optional[SelectorSet] = None
    currency: Optional[str] = None
    currency_token: Optional[str] = None
    fetch: FetchProfile = Field(default_factory=FetchProfile)

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        code = v.strip().upper()
        if not re.fullmatch(r"[A-Z]{3}", code):
            raise ValueError("currency must be a 3-letter code such as XOF")
        return code

    @model_validator(mode="after")
    def check_selectors(self) -> "SiteProfile":
        if self.strategy == "selector" and self.selectors is None:
            raise ValueError("selector profiles require a 'selectors' table")
        return self


def normalize_host(host: str) -> str:
    """Lower-case a host and drop a leading ``www.``."""
    host = (host or "").strip().lower().rstrip(".")
    if host.startswith("www."):
        host = host[4:]
    return host


def parse_site_profiles(data: object) -> Dict[str, SiteProfile]:
    """Validate a decoded profile table.

    Raises:
        ConfigurationError: If the table is not an object of valid profiles
    """
    if not isinstance(data, dict):
        raise ConfigurationError("SITE_PROFILES_PATH", "the profile table must be a JSON object")

    profiles: Dict[str, SiteProfile] = {}
    for host, raw in data.items():
        try:
            profiles[normalize_host(host)] = SiteProfile.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError("SITE_PROFILES_PATH", f"invalid profile for {host}: {e}") from e
    return profiles


def load_site_profiles(path: str) -> Dict[str, SiteProfile]:
    """Load the profile table from a JSON file.

    Args:
        path: File path, empty for "no selector table configured"

    Returns:
        Mapping of normalized host to SiteProfile

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    if not path:
        return {}

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError("SITE_PROFILES_PATH", f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError("SITE_PROFILES_PATH", f"{path} is not valid JSON: {e}") from e

    return parse_site_profiles(data)
