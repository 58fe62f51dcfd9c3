"""Data normalization utilities for text, price and URL fields.

All functions are pure and total: any input, including None, yields a
value instead of raising.
"""

import re
from typing import Any, Optional
from urllib.parse import urljoin, urlparse


_WHITESPACE_RE = re.compile(r"\s+")
_NON_DIGIT_RE = re.compile(r"[^0-9]")
_CURRENCY_CODE_RE = re.compile(r"^[A-Z]{3}$")

# Default int() string conversion limit on current interpreters
_MAX_PRICE_DIGITS = 4300


def clean_text(raw: Any) -> str:
    """Collapse line breaks, tabs and whitespace runs into single spaces.

    Args:
        raw: Raw text (None and non-strings are accepted)

    Returns:
        Trimmed single-spaced text, "" for empty input
    """
    if raw is None:
        return ""
    return _WHITESPACE_RE.sub(" ", str(raw)).strip()


def clean_price(raw: Any, currency_token: Optional[str] = "FCFA") -> Optional[int]:
    """Parse a price string into a whole number.

    Decimal and thousand separators are both discarded, so prices are read
    as integers without a fractional part:
    - "12,500 FCFA" -> 12500
    - "150.000 FCFA" -> 150000
    - "Prix: 9 900 fcfa" -> 9900

    Args:
        raw: Raw price string
        currency_token: Currency marker removed case-insensitively before parsing

    Returns:
        Non-negative int, or None if no usable digit run remains
    """
    if raw is None:
        return None

    text = str(raw)
    if not text.strip():
        return None

    if currency_token:
        text = re.sub(re.escape(currency_token), "", text, flags=re.IGNORECASE)

    digits = _NON_DIGIT_RE.sub("", text)
    if not digits or len(digits) > _MAX_PRICE_DIGITS:
        return None
    try:
        return int(digits)
    except ValueError:
        # lowered via sys.set_int_max_str_digits
        return None


def resolve_url(candidate: Any, base_url: str) -> Optional[str]:
    """Resolve a possibly relative URL against the page URL.

    Args:
        candidate: Raw URL taken from the page (relative, protocol-relative or absolute)
        base_url: URL of the page the candidate was found on

    Returns:
        Absolute http(s) URL, or None if the candidate cannot be resolved
    """
    cleaned = clean_text(candidate)
    if not cleaned or cleaned.lower().startswith(("data:", "javascript:")):
        return None

    try:
        absolute = urljoin(base_url or "", cleaned)
        parsed = urlparse(absolute)
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return absolute


def normalize_currency(raw: Any, default: str) -> str:
    """Return an upper-case 3-letter currency code, or the default.

    Args:
        raw: Currency code found on the page or returned by the generator
        default: Code used when raw is not a recognizable code

    Returns:
        Currency code such as "XOF" or "EUR"
    """
    code = clean_text(raw).upper()
    if _CURRENCY_CODE_RE.match(code):
        return code
    return default
