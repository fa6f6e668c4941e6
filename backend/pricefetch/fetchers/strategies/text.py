"""Free-text fallback: any currency-anchored number in the visible page text."""

import re
from decimal import Decimal
from typing import Optional

from pricefetch.fetchers.base import ExtractionContext
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.utils.markup import visible_text
from pricefetch.fetchers.utils.normalizer import PriceNormalizer

# Integer part is either grouped in thousands or plain digits.
_INTEGER = r"(?:\d{1,3}(?:[.,]\d{3})+|\d+)"
_COMMA_INTEGER = r"(?:\d{1,3}(?:,\d{3})+|\d+)"

_AMOUNT = _INTEGER + r"(?:[.,]\d{1,2})?"
_COMMA_AMOUNT = _COMMA_INTEGER + r"(?:\.\d{1,2})?"

FREE_TEXT_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"\$\s*(" + _COMMA_AMOUNT + r")(?![\d.,])",
        r"€\s*(" + _AMOUNT + r")(?![\d.,])",
        r"£\s*(" + _COMMA_AMOUNT + r")(?![\d.,])",
        r"₹\s*(" + _COMMA_AMOUNT + r")(?![\d.,])",
        r"₺\s*(" + _AMOUNT + r")(?![\d.,])",
        r"(?i)\bprice[:\s]*(" + _AMOUNT + r")(?![\d.,])",
        r"(?i)\bcost[:\s]*(" + _AMOUNT + r")(?![\d.,])",
        r"(?i)\$?(?<![\d.,])(" + _COMMA_INTEGER + r"\.\d{2})\s*USD\b",
        r"(?<![\d.,])(" + _INTEGER + r"[.,]\d{2})(?=\s*(?:TL|TRY|USD|EUR|GBP|₺|\$|€|£))",
        r"(?<![\d.,])(" + _AMOUNT + r")\s*(?:TL|₺)(?![A-Za-z])",
    )
)


def free_text(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """Last resort: first currency-prefixed or -suffixed amount in visible text."""
    text = visible_text(context.document)
    if not text:
        return None
    for pattern in FREE_TEXT_PATTERNS:
        for match in pattern.finditer(text):
            value = PriceNormalizer.try_normalize(match.group(1))
            if config.accepts(value):
                return value
    return None
