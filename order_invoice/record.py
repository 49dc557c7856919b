"""
Order Record

The immutable result of one extraction pass, and the assembler that
builds it from extracted fields and derived values.

assemble() is the single place that guarantees a complete record:
every field still missing after extraction gets its documented default.
The assembler is also the authoritative calculation of the total and GST:
it recomputes both from the final unit price and shipping, and the
calculator's amounts are only compared against them (a disagreement is
logged). The shipping method and label are taken from the calculator.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from loguru import logger

from .config import InvoiceSettings
from .parser.normalizers import format_amount, parse_amount, parse_quantity
from .validation.calculator import (
    DerivedValues,
    ShippingMethod,
    amount_or_zero,
    gst_from_inclusive_total,
    round2,
)


@dataclass(frozen=True)
class OrderRecord:
    """
    Structured order data handed to the invoice renderer.

    Amounts are strings with exactly 2 fractional digits.
    """
    order_number: str
    date: str
    description: str
    quantity: int
    unit_price: str
    shipping_cost: str
    total_amount: str
    tax_amount: str
    shipping_method: ShippingMethod
    shipping_label: str
    is_pickup: bool
    customer_name: str = ''
    email: str = ''

    def document_name(self, prefix: str = 'Invoice') -> str:
        """Output document identifier, e.g. "Invoice_1001"."""
        return f"{prefix}_{self.order_number}"

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary."""
        return {
            'order_number': self.order_number,
            'date': self.date,
            'description': self.description,
            'quantity': self.quantity,
            'unit_price': self.unit_price,
            'shipping_cost': self.shipping_cost,
            'total_amount': self.total_amount,
            'tax_amount': self.tax_amount,
            'shipping_method': self.shipping_method.value,
            'shipping_label': self.shipping_label,
            'is_pickup': self.is_pickup,
            'customer_name': self.customer_name,
            'email': self.email,
        }


def assemble(
    fields: Mapping[str, str],
    derived: DerivedValues,
    settings: Optional[InvoiceSettings] = None,
) -> OrderRecord:
    """
    Merge extracted fields and derived values into an OrderRecord.

    Args:
        fields: ExtractedFields mapping (any field may be absent)
        derived: Output of the derived-value calculator
        settings: Settings providing the documented defaults

    Returns:
        A complete, immutable OrderRecord
    """
    settings = settings or InvoiceSettings()
    defaults = settings.extraction

    unit_price = amount_or_zero(fields.get('unit_price'))
    shipping = amount_or_zero(fields.get('shipping_cost'))

    total = round2(unit_price + shipping)
    derived_total = parse_amount(derived.total_amount)
    if derived_total != total:
        logger.warning(f"Derived total {derived.total_amount} disagrees with {total}; using {total}")

    tax = gst_from_inclusive_total(total)
    derived_tax = parse_amount(derived.tax_amount)
    if derived_tax != tax:
        logger.warning(f"Derived GST {derived.tax_amount} disagrees with {tax}; using {tax}")

    record = OrderRecord(
        order_number=fields.get('order_number') or '',
        date=fields.get('date') or defaults.default_date,
        description=fields.get('description') or defaults.default_description,
        quantity=parse_quantity(fields.get('quantity')) or 1,
        unit_price=format_amount(unit_price),
        shipping_cost=format_amount(shipping),
        total_amount=format_amount(total),
        tax_amount=format_amount(tax),
        shipping_method=derived.shipping_method,
        shipping_label=derived.shipping_label,
        is_pickup=derived.is_pickup,
        customer_name=fields.get('customer_name') or '',
        email=fields.get('email') or defaults.no_email_text,
    )

    logger.debug(f"Assembled record for order '{record.order_number}'")
    return record
