"""
Tests for text normalization and typed value parsing.
"""

import re
from decimal import Decimal

from order_invoice.parser.normalizers import (
    CurrencyNormalizer,
    QuantityNormalizer,
    TextNormalizer,
    collapse_spaced_phrase,
    format_amount,
    normalize,
    parse_amount,
    parse_quantity,
    spaced_pattern,
)


class TestTextNormalizer:
    """Tests for RawText normalization."""

    def test_collapses_whitespace(self):
        assert normalize("  Order   #1001\n15 March\t2024  ") == "Order #1001 15 March 2024"

    def test_keeps_case_and_punctuation(self):
        assert normalize("GST 10% (Included)  $5.82") == "GST 10% (Included) $5.82"

    def test_empty_input(self):
        assert normalize("") == ""
        assert normalize(None) == ""

    def test_whitespace_only(self):
        assert TextNormalizer.normalize(" \n\t ") == ""


class TestCollapseSpacedPhrase:
    """Tests for re-collapsing spaced-out phrases."""

    def test_product_phrase(self):
        spaced = " ".join("Buongiorno Positano! Large / Clear Glass Vase".replace(" ", ""))
        assert collapse_spaced_phrase(spaced) == "Buongiorno Positano! Large / Clear Glass Vase"

    def test_already_readable_phrase_is_unchanged(self):
        phrase = "Buongiorno Positano! Large / Clear Glass Vase"
        assert collapse_spaced_phrase(phrase) == phrase

    def test_separators(self):
        assert collapse_spaced_phrase("S a l t & P e p p e r") == "Salt & Pepper"

    def test_closing_punctuation(self):
        assert collapse_spaced_phrase("H e l l o , W o r l d") == "Hello, World"

    def test_empty(self):
        assert collapse_spaced_phrase("") == ""


class TestSpacedPattern:
    """Tests for spacing-tolerant patterns."""

    def test_matches_spaced_form(self):
        pattern = re.compile(spaced_pattern("Pickup"))
        assert pattern.search("P i c k u p")
        assert pattern.search("Pickup")

    def test_phrase_whitespace_is_optional(self):
        pattern = re.compile(spaced_pattern("Fresh Courier"))
        assert pattern.search("F r e s hC o u r i e r")
        assert pattern.search("Fresh Courier")

    def test_escapes_regex_characters(self):
        pattern = re.compile(spaced_pattern("GST (10%)"))
        assert pattern.search("G S T ( 1 0 % )")
        assert not pattern.search("GST 10%")


class TestCurrencyNormalizer:
    """Tests for currency parsing."""

    def setup_method(self):
        self.normalizer = CurrencyNormalizer()

    def test_plain_amount(self):
        assert self.normalizer.parse("45.00") == Decimal("45.00")

    def test_dollar_and_commas(self):
        assert self.normalizer.parse("$ 1,234.50") == Decimal("1234.50")

    def test_rounds_half_up(self):
        assert self.normalizer.parse("2.345") == Decimal("2.35")

    def test_invalid(self):
        assert self.normalizer.parse("abc") is None
        assert self.normalizer.parse("") is None
        assert self.normalizer.parse(None) is None

    def test_non_finite(self):
        assert self.normalizer.parse("NaN") is None
        assert self.normalizer.parse("Infinity") is None

    def test_format_has_two_decimals(self):
        assert format_amount(Decimal("5")) == "5.00"
        assert self.normalizer.format(Decimal("5.818")) == "5.82"

    def test_module_helper(self):
        assert parse_amount("$19.00") == Decimal("19.00")


class TestQuantityNormalizer:
    """Tests for quantity parsing."""

    def setup_method(self):
        self.normalizer = QuantityNormalizer()

    def test_positive_integer(self):
        assert self.normalizer.parse("2") == 2
        assert self.normalizer.parse(" 12 ") == 12

    def test_rejects_zero_and_negative(self):
        assert self.normalizer.parse("0") is None
        assert self.normalizer.parse("-1") is None

    def test_rejects_non_integer(self):
        assert parse_quantity("1.5") is None
        assert parse_quantity("two") is None
        assert parse_quantity(None) is None
