"""
Parser Package

This package turns flattened order text into named string fields.
It includes:
- Normalization of RawText and spaced-out phrases
- The declarative extraction rule table
- The FieldMapper that evaluates the rules independently

Usage:
    from order_invoice.parser import FieldMapper, normalize

    fields = FieldMapper().extract(normalize(raw_text))
    print(fields['order_number'], fields['unit_price'])
"""

from .field_mapper import (
    FieldMapper,
    ExtractedField,
    ExtractedFields,
    extract_fields_from_text,
)

from .normalizers import (
    TextNormalizer,
    CurrencyNormalizer,
    QuantityNormalizer,
    normalize,
    collapse_spaced_phrase,
    spaced_pattern,
    parse_amount,
    format_amount,
    parse_quantity,
)

from .rules import (
    ExtractionRule,
    build_rules,
)

__all__ = [
    # Field Mapper
    'FieldMapper',
    'ExtractedField',
    'ExtractedFields',
    'extract_fields_from_text',

    # Normalizers
    'TextNormalizer',
    'CurrencyNormalizer',
    'QuantityNormalizer',
    'normalize',
    'collapse_spaced_phrase',
    'spaced_pattern',
    'parse_amount',
    'format_amount',
    'parse_quantity',

    # Rules
    'ExtractionRule',
    'build_rules',
]
