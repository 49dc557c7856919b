"""
Extraction Rules

The declarative rule table the FieldMapper evaluates against normalized
order text. Each row is an ExtractionRule:

    pattern      -> regex with capture groups
    groups       -> which capture group fills which field
    constants    -> values emitted when the pattern matches
    alternative  -> narrower rule tried when the pattern misses
    fallback     -> values used when nothing matched

Rules are independent. None reads another rule's output, so they can be
evaluated in any order and each row can be tested on its own.

Shopify order PDFs look roughly like this once flattened:

    Order #1001 15 March 2024 Customer Jane Smith Contact information
    jane@example.com ... Buongiorno Positano! Large / Clear Glass Vase
    $45.00 × 2 ... Shipping Fresh Courier Delivery $19.00 ...
    GST 10% (Included) $5.82 Total $64.00
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Pattern

from ..config import ExtractionSettings
from .normalizers import collapse_spaced_phrase, normalize, spaced_pattern


ORDER_NUMBER = 'order_number'
DATE = 'date'
UNIT_PRICE = 'unit_price'
QUANTITY = 'quantity'
SHIPPING_COST = 'shipping_cost'
DESCRIPTION = 'description'
IS_PICKUP = 'is_pickup'
CUSTOMER_NAME = 'customer_name'
EMAIL = 'email'
REPORTED_TAX = 'reported_tax'

_MONTHS = (
    'January|February|March|April|May|June|July|August|September|October|'
    'November|December|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec'
)

# Amount with exactly 2 fractional digits, optional thousands commas
_AMOUNT = r'(\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2})(?!\d)'

# Headings that close the customer and contact sections of a Shopify order
_SECTION_END = (
    r'Contact\s+information\b|Shipping\s+address\b|Billing\s+address\b|'
    r'Payment\b|\d+\s+orders?\b'
)


@dataclass(frozen=True)
class ExtractionRule:
    """
    One independent pattern-plus-fallback unit producing one or more fields.
    """
    name: str
    pattern: Pattern[str]
    groups: Mapping[str, int] = field(default_factory=dict)   # field -> group (0 = whole match)
    constants: Mapping[str, str] = field(default_factory=dict)
    amounts: frozenset = frozenset()                          # fields parsed as currency
    quantities: frozenset = frozenset()                       # fields parsed as positive ints
    transforms: Mapping[str, Callable[[str], str]] = field(default_factory=dict)
    alternative: Optional['ExtractionRule'] = None
    fallback: Optional[Mapping[str, str]] = None
    description: str = ''

    @property
    def fields(self) -> tuple[str, ...]:
        """Every field this rule can populate, in declaration order."""
        names: list[str] = []
        sources = [self.groups, self.constants, self.fallback or {}]
        if self.alternative is not None:
            sources.append(dict.fromkeys(self.alternative.fields))
        for source in sources:
            for name in source:
                if name not in names:
                    names.append(name)
        return tuple(names)


def build_rules(settings: Optional[ExtractionSettings] = None) -> tuple[ExtractionRule, ...]:
    """
    Build the rule table for a set of extraction settings.

    Product phrases, the shipping phrase, the pickup keyword, the carrier
    flat rate and the defaults all come from settings.
    """
    settings = settings or ExtractionSettings()

    flat_units, flat_cents = settings.carrier_flat_rate.split('.')
    products = '|'.join(f'(?:{spaced_pattern(p)})' for p in settings.products)

    return (
        ExtractionRule(
            name=ORDER_NUMBER,
            pattern=re.compile(r'#(\d+)'),
            groups={ORDER_NUMBER: 1},
            description='Order number after a "#"',
        ),
        ExtractionRule(
            name=DATE,
            pattern=re.compile(
                rf'\b(0?[1-9]|[12]\d|3[01])\s+(?:{_MONTHS})\b\s+(\d{{4}})\b'
            ),
            groups={DATE: 0},
            transforms={DATE: normalize},
            fallback={DATE: settings.default_date},
            description='Day, month name and 4-digit year',
        ),
        ExtractionRule(
            name='price_quantity',
            pattern=re.compile(rf'\$\s*{_AMOUNT}\s*[×xX]\s*(\d+)\b'),
            groups={UNIT_PRICE: 1, QUANTITY: 2},
            amounts=frozenset({UNIT_PRICE}),
            quantities=frozenset({QUANTITY}),
            fallback={QUANTITY: '1'},
            description='Unit price followed by a multiplication glyph and quantity',
        ),
        ExtractionRule(
            name=SHIPPING_COST,
            pattern=re.compile(
                rf'{spaced_pattern(settings.shipping_phrase)}.*?\$\s*{_AMOUNT}'
            ),
            groups={SHIPPING_COST: 1},
            amounts=frozenset({SHIPPING_COST}),
            alternative=ExtractionRule(
                name='carrier_flat_rate',
                pattern=re.compile(
                    rf'\$\s*{re.escape(flat_units)}\s*\.\s*{re.escape(flat_cents)}(?!\d)'
                ),
                constants={SHIPPING_COST: settings.carrier_flat_rate},
                description='Bare carrier flat-rate amount',
            ),
            fallback={SHIPPING_COST: '0.00'},
            description='Labelled courier shipping line followed by an amount',
        ),
        ExtractionRule(
            name=DESCRIPTION,
            pattern=re.compile(products),
            groups={DESCRIPTION: 0},
            transforms={DESCRIPTION: _product_name(settings.products)},
            fallback={DESCRIPTION: settings.default_description},
            description='Known product phrase, tolerant of spacing noise',
        ),
        ExtractionRule(
            name=IS_PICKUP,
            pattern=re.compile(spaced_pattern(settings.pickup_keyword)),
            constants={IS_PICKUP: 'true'},
            fallback={IS_PICKUP: 'false'},
            description='Pickup keyword anywhere in the text',
        ),
        ExtractionRule(
            name=CUSTOMER_NAME,
            pattern=re.compile(rf'\bCustomer\s+(.+?)\s*(?=\b(?:{_SECTION_END}))'),
            groups={CUSTOMER_NAME: 1},
            transforms={CUSTOMER_NAME: _letters_required},
            description='Name under the "Customer" heading',
        ),
        ExtractionRule(
            name=EMAIL,
            pattern=re.compile(
                r'\bContact\s+information\s+'
                r'(?:(?!Shipping\s+address|Billing\s+address).)*?'
                r'([\w.+-]+@[\w-]+(?:\.[\w-]+)+)'
            ),
            groups={EMAIL: 1},
            fallback={EMAIL: settings.no_email_text},
            description='First email address under "Contact information"',
        ),
        ExtractionRule(
            name=REPORTED_TAX,
            pattern=re.compile(
                rf'GST\s*10\s*%\s*\(\s*Included\s*\)\s*\$\s*{_AMOUNT}'
            ),
            groups={REPORTED_TAX: 1},
            amounts=frozenset({REPORTED_TAX}),
            description='GST line printed on the order, used for cross-checks only',
        ),
    )


def _letters_required(value: str) -> str:
    """Names must contain at least one letter; anything else is a miss."""
    return value if any(c.isalpha() for c in value) else ''


def _product_name(products: tuple[str, ...]) -> Callable[[str], str]:
    """
    Map a matched product phrase back to its configured spelling.

    Falls back to collapse_spaced_phrase when no configured phrase matches
    the whole capture.
    """
    compiled = [(p, re.compile(spaced_pattern(p))) for p in products]

    def transform(value: str) -> str:
        for phrase, pattern in compiled:
            if pattern.fullmatch(value):
                return phrase
        return collapse_spaced_phrase(value)

    return transform
