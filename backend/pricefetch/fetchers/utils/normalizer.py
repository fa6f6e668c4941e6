"""Locale-aware price parsing.

Every strategy funnels raw price text through ``PriceNormalizer`` so the
decimal/thousands separator rule is applied the same way no matter where
the text came from:

- ``"1.234,56"``, ``"1,234.56"``, ``"1234,56"``, ``"1234.56"`` -> 1234.56
- ``"1234"`` -> 1234
- ``"1.234"`` / ``"1,234"`` -> 1234 (three-digit groups are thousands)
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Pattern, Sequence, Union

import structlog

from pricefetch.core.exceptions import NotANumberError

logger = structlog.get_logger(__name__)


# Currency symbols and codes stripped before pattern matching. Letter
# codes must stand alone so "TL" inside a word is left untouched.
_CURRENCY_TOKENS = re.compile(
    r"[₺$€£₹₩¥원]|(?<![A-Za-z])(?:US\$|TL|TRY|USD|EUR|GBP|INR|KRW|JPY)(?![A-Za-z])",
    re.IGNORECASE,
)

# Whitespace inside a number ("1 234,56", "1.234, 56")
_INNER_WHITESPACE = re.compile(r"(?<=[\d.,])\s+(?=\d)")

# Ordered most specific to least; group 1 holds the numeric literal.
DEFAULT_PATTERNS: Sequence[Pattern] = (
    re.compile(r"(?<![\d.,])(\d{1,3}(?:\.\d{3})+,\d{2})(?!\d)"),  # 1.234,56
    re.compile(r"(?<![\d.,])(\d{1,3}(?:,\d{3})+\.\d{1,2})(?!\d)"),  # 1,234.56
    re.compile(r"(?<![\d.,])(\d+,\d{2})(?!\d)"),  # 1234,56
    re.compile(r"(?<![\d.,])(\d+\.\d{1,2})(?!\d)"),  # 1234.56
    re.compile(r"(?<![\d.,])(\d{1,3}(?:[.,]\d{3})+)(?![\d.,])"),  # 1.234 / 1,234
    re.compile(r"(\d+)"),  # 1234
)

_DOT_THOUSANDS = re.compile(r"\d{1,3}(?:\.\d{3})+")
_COMMA_DECIMAL_TAIL = re.compile(r",\d{2}$")


def resolve_separators(literal: str) -> str:
    """Rewrite a numeric literal into plain ``1234.56`` form.

    If both separators are present the one appearing last is the decimal
    separator. A lone comma is a decimal separator only when exactly two
    digits follow it at the end; otherwise commas are thousands grouping.
    Dots only in ``1.234.567`` shape are thousands grouping.
    """
    literal = literal.strip()

    if "," in literal and "." in literal:
        decimal_sep = "," if literal.rfind(",") > literal.rfind(".") else "."
        whole, _, fraction = literal.rpartition(decimal_sep)
        whole = whole.replace(",", "").replace(".", "")
        return f"{whole}.{fraction}"

    if "," in literal:
        if _COMMA_DECIMAL_TAIL.search(literal):
            whole, _, fraction = literal.rpartition(",")
            return f"{whole.replace(',', '')}.{fraction}"
        return literal.replace(",", "")

    if "." in literal:
        if _DOT_THOUSANDS.fullmatch(literal):
            return literal.replace(".", "")
        whole, _, fraction = literal.rpartition(".")
        return f"{whole.replace('.', '')}.{fraction}"

    return literal


class PriceNormalizer:
    """Converts raw price-like text into ``Decimal`` values."""

    @staticmethod
    def clean(raw: str) -> str:
        """Strip currency tokens and whitespace inside numbers."""
        cleaned = _CURRENCY_TOKENS.sub(" ", raw)
        cleaned = _INNER_WHITESPACE.sub("", cleaned)
        return cleaned.strip()

    @staticmethod
    def to_decimal(literal: str) -> Decimal:
        """Resolve separators in an already isolated literal.

        Raises:
            NotANumberError: If the literal is not numeric after resolution
        """
        try:
            return Decimal(resolve_separators(literal))
        except InvalidOperation:
            raise NotANumberError(literal)

    @classmethod
    def normalize(
        cls,
        raw: str,
        patterns: Iterable[Union[str, Pattern]] = (),
    ) -> Decimal:
        """Parse the first recognizable number out of ``raw``.

        Site patterns (``patterns``) are tried before the defaults. Each
        pattern's first capture group (or whole match when it has none)
        is taken as the literal.

        Args:
            raw: Raw price text, e.g. "1.299,00 TL"
            patterns: Extra regexes tried first, most specific first

        Returns:
            Parsed price

        Raises:
            NotANumberError: If no pattern matches
        """
        if raw is None or not str(raw).strip():
            raise NotANumberError(raw or "")

        raw = str(raw)
        cleaned = cls.clean(raw)

        # Site patterns see the raw text so they can anchor on currency words.
        candidates = [(p, raw) for p in patterns] + [(p, cleaned) for p in DEFAULT_PATTERNS]

        for pattern, text in candidates:
            try:
                regex = re.compile(pattern) if isinstance(pattern, str) else pattern
            except re.error as e:
                logger.debug("price_pattern_invalid", pattern=pattern, error=str(e))
                continue

            match = regex.search(text)
            if not match:
                continue
            literal = match.group(1) if regex.groups else match.group(0)
            try:
                return cls.to_decimal(cls.clean(literal))
            except NotANumberError:
                continue

        raise NotANumberError(raw)

    @classmethod
    def try_normalize(
        cls,
        raw: Optional[str],
        patterns: Iterable[Union[str, Pattern]] = (),
    ) -> Optional[Decimal]:
        """Like ``normalize`` but returns None instead of raising."""
        if not raw:
            return None
        try:
            return cls.normalize(raw, patterns)
        except NotANumberError:
            return None
