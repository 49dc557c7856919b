"""
Derived-Value Calculator

Computes the values an order PDF does not state reliably:

- Total = unit price + shipping
- GST = total / 11 (10% GST already included in the total)
- Shipping method: pickup or courier delivery

Design Philosophy:
- Decimal arithmetic with ROUND_HALF_UP, never float
- Missing or unparseable numbers count as zero; nothing here raises
- Tax is back-calculated from a tax-inclusive total, not added on top
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Mapping, Optional

from ..config import InvoiceLabels
from ..parser.normalizers import CENTS, parse_amount

logger = logging.getLogger(__name__)

# A total that includes 10% GST holds total/11 of tax
GST_DIVISOR = Decimal('11')

ZERO = Decimal('0.00')


class ShippingMethod(Enum):
    """How the order reaches the customer."""
    PICKUP = 'pickup'
    DELIVERY = 'delivery'


@dataclass(frozen=True)
class DerivedValues:
    """
    Values computed from the extracted fields.
    """
    total_amount: str
    tax_amount: str
    shipping_method: ShippingMethod
    shipping_label: str

    @property
    def is_pickup(self) -> bool:
        return self.shipping_method is ShippingMethod.PICKUP


def round2(amount: Decimal) -> Decimal:
    """Round to cents using standard (half-up) rounding."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def amount_or_zero(value: Optional[str]) -> Decimal:
    """Parse an extracted amount, treating absent or invalid values as zero."""
    amount = parse_amount(value)
    return amount if amount is not None else ZERO


def gst_from_inclusive_total(total: Decimal) -> Decimal:
    """Tax component of a total that already includes 10% GST."""
    return round2(total / GST_DIVISOR)


def derive(
    fields: Mapping[str, str],
    labels: Optional[InvoiceLabels] = None,
) -> DerivedValues:
    """
    Compute totals, tax and shipping method from extracted fields.

    Args:
        fields: ExtractedFields mapping (any field may be absent)
        labels: Invoice labels providing the shipping method text

    Returns:
        DerivedValues
    """
    labels = labels or InvoiceLabels()

    unit_price = amount_or_zero(fields.get('unit_price'))
    shipping = amount_or_zero(fields.get('shipping_cost'))

    total = round2(unit_price + shipping)
    tax = gst_from_inclusive_total(total)

    is_pickup = str(fields.get('is_pickup', 'false')).lower() == 'true'
    if is_pickup:
        method, label = ShippingMethod.PICKUP, labels.pickup
    else:
        method, label = ShippingMethod.DELIVERY, labels.delivery

    logger.debug(
        f"Derived total {total} = {unit_price} + {shipping}, GST {tax}, {method.value}"
    )

    return DerivedValues(
        total_amount=str(total),
        tax_amount=str(tax),
        shipping_method=method,
        shipping_label=label,
    )
