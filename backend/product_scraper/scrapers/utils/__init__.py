"""Scraper utilities for data normalization and text generation."""

from .normalizer import clean_price, clean_text, normalize_currency, resolve_url
from .generator import GeminiGenerator, TextGenerator


__all__ = [
    # Normalization
    "clean_text",
    "clean_price",
    "resolve_url",
    "normalize_currency",
    # Text generation
    "TextGenerator",
    "GeminiGenerator",
]
