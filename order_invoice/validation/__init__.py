"""
Validation Package

Derived values and arithmetic consistency for order records.

Key Principle: the numbers on the invoice must agree with each other.
Total is always unit price + shipping, and GST is always total / 11.

Usage:
    from order_invoice.validation import derive, ArithmeticChecker

    derived = derive(fields)
    result = ArithmeticChecker().check_record(record)
"""

from .calculator import (
    DerivedValues,
    ShippingMethod,
    GST_DIVISOR,
    derive,
    round2,
    amount_or_zero,
    gst_from_inclusive_total,
)
from .arithmetic_checks import (
    ArithmeticChecker,
    ArithmeticResult,
    CalculationError,
    ErrorType,
)

__all__ = [
    # Calculator
    'DerivedValues',
    'ShippingMethod',
    'GST_DIVISOR',
    'derive',
    'round2',
    'amount_or_zero',
    'gst_from_inclusive_total',

    # Arithmetic checks
    'ArithmeticChecker',
    'ArithmeticResult',
    'CalculationError',
    'ErrorType',
]
