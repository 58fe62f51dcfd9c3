"""Pydantic schemas for the scrape endpoint.

Every response uses the same envelope:
``{success: true, data}`` / ``{success: true, html}`` on success and
``{success: false, message}`` on failure.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ScrapeRequest(BaseModel):
    """Body of POST /scrape. The URL is validated by the endpoint so that a
    missing or invalid URL answers 400 with the standard envelope."""

    url: Optional[str] = Field(
        None,
        description="Absolute http(s) URL of the product page",
        examples=["https://shop.test/item/42"],
    )
    mode: Optional[Literal["product", "html"]] = Field(
        None,
        description="'product' extracts a record, 'html' returns the rendered page. "
        "Defaults to the DEFAULT_MODE setting.",
    )


class ProductData(BaseModel):
    """Product record serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    product_name: str = Field(..., alias="productName")
    price: Optional[int] = Field(None, ge=0)
    currency: str
    description_complete: str = Field(..., alias="descriptionComplete")
    image_url: Optional[str] = Field(None, alias="imageUrl")
    product_url: str = Field(..., alias="productUrl")


class ScrapeResponse(BaseModel):
    """Standard scrape response envelope."""

    success: bool
    data: Optional[ProductData] = None
    html: Optional[str] = None
    message: Optional[str] = None
