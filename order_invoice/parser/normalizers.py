"""
Normalizers Module

This module prepares RawText for pattern matching and turns captured
strings into typed values.

What normalization does:
- RawText -> one trimmed, single-spaced string (casing and punctuation kept,
  so labels like "GST 10%" stay intact)
- Spaced-out labels ("P i c k u p") -> matched by spacing-tolerant patterns
  and re-collapsed to readable spacing ("Pickup")
- Currency captures -> Decimal with exactly 2 fractional digits
- Quantity captures -> positive int

Why the spacing helpers exist:
Some PDF generators emit each glyph as its own text fragment. After the
fragments are joined with spaces, "Pickup" arrives as "P i c k u p" and a
plain regex never sees the word. Spacing-tolerant patterns allow any
whitespace between every character of a phrase.

Nothing in here raises on bad input. Parse helpers return None so the
caller can apply its documented fallback.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from loguru import logger


CENTS = Decimal('0.01')

# Punctuation that closes a word: one space after, none before
_CLOSING_PUNCTUATION = '!?,;:'
# Separators that stand between words: one space either side
_SEPARATORS = '/&'


class TextNormalizer:
    """Normalizes RawText and spaced-out phrases."""

    @staticmethod
    def normalize(raw: str) -> str:
        """
        Collapse a raw text stream into a search-friendly string.

        - Every whitespace run (spaces, tabs, newlines) becomes one space
        - Leading/trailing whitespace is trimmed
        - Casing and punctuation are untouched

        Always returns a string; empty input gives "".
        """
        if not raw:
            return ""
        return re.sub(r'\s+', ' ', raw).strip()

    @staticmethod
    def collapse_spaced_phrase(text: str) -> str:
        """
        Re-collapse a phrase whose characters were separated by spacing noise.

        Steps:
        1. Remove all whitespace
        2. Insert a space at lower-to-upper case transitions
        3. Put one space after closing punctuation (! ? , ; :)
        4. Put one space around separators (/ &)
        5. Collapse and trim

        "B u o n g i o r n o P o s i t a n o ! L a r g e / C l e a r"
        becomes "Buongiorno Positano! Large / Clear".
        """
        if not text:
            return ""

        collapsed = re.sub(r'\s+', '', text)
        collapsed = re.sub(r'([a-z])([A-Z])', r'\1 \2', collapsed)
        collapsed = re.sub(
            rf'([{re.escape(_CLOSING_PUNCTUATION)}])', r'\1 ', collapsed
        )
        collapsed = re.sub(rf'([{re.escape(_SEPARATORS)}])', r' \1 ', collapsed)
        return re.sub(r'\s+', ' ', collapsed).strip()

    @staticmethod
    def spaced_pattern(phrase: str) -> str:
        """
        Build a regex matching `phrase` with any whitespace between characters.

        Whitespace inside the phrase itself is optional in the match, so
        both "Fresh Courier" and "F r e s hC o u r i e r" are found.
        """
        chars = [re.escape(c) for c in phrase if not c.isspace()]
        return r'\s*'.join(chars)


class CurrencyNormalizer:
    """Parses currency captures into 2-decimal Decimals."""

    def parse(self, value: Optional[str]) -> Optional[Decimal]:
        """
        Parse a currency string.

        Handles a leading "$", thousands commas and stray spaces
        ("$ 1,234 . 50"). Returns None when the value is missing or is not
        a finite decimal; never raises.
        """
        if value is None:
            return None

        cleaned = re.sub(r'[\s$,]', '', str(value))
        if not cleaned:
            return None

        try:
            amount = Decimal(cleaned)
            if not amount.is_finite():
                logger.debug(f"Non-finite amount rejected: {value!r}")
                return None
            return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            logger.debug(f"Could not parse amount: {value!r}")
            return None

    def format(self, amount: Decimal) -> str:
        """Render a Decimal with exactly 2 fractional digits."""
        return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


class QuantityNormalizer:
    """Parses quantity captures."""

    def parse(self, value: Optional[str]) -> Optional[int]:
        """
        Parse a positive integer quantity.

        Returns None for missing, non-integer, zero or negative values.
        """
        if value is None:
            return None

        cleaned = str(value).strip()
        if not re.fullmatch(r'\d+', cleaned, re.ASCII):
            return None

        quantity = int(cleaned)
        return quantity if quantity > 0 else None


# Convenience functions

def normalize(raw: str) -> str:
    """Collapse RawText into the single-spaced string the rules search."""
    return TextNormalizer.normalize(raw)


def collapse_spaced_phrase(text: str) -> str:
    """Re-collapse a spaced-out phrase to readable spacing."""
    return TextNormalizer.collapse_spaced_phrase(text)


def spaced_pattern(phrase: str) -> str:
    """Spacing-tolerant regex source for a phrase."""
    return TextNormalizer.spaced_pattern(phrase)


def parse_amount(value: Optional[str]) -> Optional[Decimal]:
    """Parse a currency string to a 2-decimal Decimal, or None."""
    return CurrencyNormalizer().parse(value)


def format_amount(amount: Decimal) -> str:
    """Format a Decimal as a 2-decimal string."""
    return CurrencyNormalizer().format(amount)


def parse_quantity(value: Optional[str]) -> Optional[int]:
    """Parse a positive integer quantity, or None."""
    return QuantityNormalizer().parse(value)
