"""Tests for price normalization."""

from decimal import Decimal

import pytest

from pricefetch.core.exceptions import NotANumberError
from pricefetch.fetchers.utils.normalizer import PriceNormalizer, resolve_separators


# ============================================================================
# TESTS: SEPARATOR RESOLUTION
# ============================================================================


class TestResolveSeparators:
    """Test decimal/thousands separator rules."""

    @pytest.mark.parametrize(
        "literal,expected",
        [
            ("1.234,56", "1234.56"),
            ("1,234.56", "1234.56"),
            ("1.234.567,89", "1234567.89"),
            ("12,34", "12.34"),
            ("1,234", "1234"),
            ("1.234", "1234"),
            ("12.5", "12.5"),
            ("1234", "1234"),
        ],
    )
    def test_resolve(self, literal, expected):
        """Test the last separator is decimal and 3-digit groups are thousands."""
        assert resolve_separators(literal) == expected


# ============================================================================
# TESTS: NORMALIZE
# ============================================================================


class TestNormalize:
    """Test PriceNormalizer.normalize."""

    @pytest.mark.parametrize("raw", ["1.234,56", "1,234.56", "1234,56", "1234.56"])
    def test_decimal_encodings_agree(self, raw):
        """Test the four decimal encodings all yield the same value."""
        assert PriceNormalizer.normalize(raw) == Decimal("1234.56")

    def test_bare_integer(self):
        """Test an integer with no separators."""
        assert PriceNormalizer.normalize("1234") == Decimal("1234")

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1.299,00 TL", Decimal("1299.00")),
            ("₺1.299,00", Decimal("1299.00")),
            ("$1,234.56", Decimal("1234.56")),
            ("€ 12,99", Decimal("12.99")),
            ("1 234,56 €", Decimal("1234.56")),
            ("Fiyat: 1.299,99 TL'den başlayan", Decimal("1299.99")),
        ],
    )
    def test_currency_and_noise_stripped(self, raw, expected):
        """Test currency tokens, inner whitespace and surrounding words are ignored."""
        assert PriceNormalizer.normalize(raw) == expected

    def test_dotted_thousands_without_decimals(self):
        """Test dot-grouped integers are read as thousands."""
        assert PriceNormalizer.normalize("1.234") == Decimal("1234")
        assert PriceNormalizer.normalize("1.234.567") == Decimal("1234567")

    def test_site_patterns_take_precedence(self):
        """Test site patterns run before the defaults."""
        raw = "Eski: 2.000 TL Yeni: 1.500 TL"

        assert PriceNormalizer.normalize(raw) == Decimal("2000")
        assert PriceNormalizer.normalize(raw, [r"Yeni:\s*([\d.]+)"]) == Decimal("1500")

    def test_site_pattern_sees_currency_words(self):
        """Test site patterns can anchor on TL in the raw text."""
        value = PriceNormalizer.normalize("Kargo 29,90 | 349,90 TL", [r"([\d.]+,\d{2})\s*TL"])
        assert value == Decimal("349.90")

    def test_invalid_site_pattern_is_skipped(self):
        """Test a broken site regex does not stop normalization."""
        assert PriceNormalizer.normalize("12,50", ["([unclosed"]) == Decimal("12.50")

    @pytest.mark.parametrize("raw", ["N/A", "", "   ", "TL", "Stokta yok"])
    def test_not_a_number(self, raw):
        """Test text without digits raises NotANumberError."""
        with pytest.raises(NotANumberError):
            PriceNormalizer.normalize(raw)

    def test_try_normalize_returns_none(self):
        """Test try_normalize swallows NotANumberError."""
        assert PriceNormalizer.try_normalize("N/A") is None
        assert PriceNormalizer.try_normalize(None) is None
        assert PriceNormalizer.try_normalize("49,90 TL") == Decimal("49.90")
