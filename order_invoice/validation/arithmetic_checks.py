"""
Arithmetic Validation Module

This module re-verifies the arithmetic of an assembled OrderRecord.

Checks Performed:
- Unit price + shipping = total
- Total / 11 = GST (10% included)
- GST printed on the order ≈ computed GST (when the order prints one)

The first two always hold for records built by assemble(); they guard
records built by hand or loaded from elsewhere. The third catches orders
whose price or shipping line was misread: the printed GST line is never
used as the tax amount, only compared against it.

Design Philosophy:
- Use Decimal for precision (no float rounding)
- Allow a configurable tolerance for the printed GST comparison
- Report all mismatches, never raise
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional, List, Dict, Any

from ..parser.normalizers import parse_amount
from .calculator import amount_or_zero, gst_from_inclusive_total, round2

if TYPE_CHECKING:
    from ..record import OrderRecord

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Types of arithmetic errors."""
    TOTAL_MISMATCH = auto()           # Unit price + shipping != total
    TAX_CALCULATION_ERROR = auto()    # Total / 11 != tax
    REPORTED_TAX_MISMATCH = auto()    # Printed GST != computed GST


@dataclass
class CalculationError:
    """
    A specific calculation error found during arithmetic validation.
    """
    error_type: ErrorType
    message: str
    expected_value: Decimal
    actual_value: Decimal
    field_name: Optional[str] = None
    is_critical: bool = False

    @property
    def difference(self) -> Decimal:
        return abs(self.expected_value - self.actual_value)

    @property
    def is_likely_transposition(self) -> bool:
        """Check if error might be due to digit transposition."""
        exp_str = str(abs(self.expected_value)).replace('.', '')
        act_str = str(abs(self.actual_value)).replace('.', '')

        if len(exp_str) != len(act_str):
            return False

        return sorted(exp_str) == sorted(act_str) and exp_str != act_str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'error_type': self.error_type.name,
            'message': self.message,
            'expected_value': str(self.expected_value),
            'actual_value': str(self.actual_value),
            'difference': str(self.difference),
            'field_name': self.field_name,
            'is_critical': self.is_critical,
            'is_likely_transposition': self.is_likely_transposition,
        }


@dataclass
class ArithmeticResult:
    """
    Complete result of arithmetic validation.
    """
    is_valid: bool
    errors: List[CalculationError]
    checks_performed: int
    computed_values: Dict[str, Decimal] = field(default_factory=dict)

    @property
    def has_critical_errors(self) -> bool:
        return any(e.is_critical for e in self.errors)

    @property
    def warnings(self) -> List[str]:
        return [e.message for e in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_valid': self.is_valid,
            'checks_performed': self.checks_performed,
            'has_critical_errors': self.has_critical_errors,
            'errors': [e.to_dict() for e in self.errors],
            'computed_values': {k: str(v) for k, v in self.computed_values.items()},
        }


class ArithmeticChecker:
    """
    Arithmetic validation for order records.

    Usage:
        checker = ArithmeticChecker()
        result = checker.check_record(record, reported_tax='5.82')

        if not result.is_valid:
            for error in result.errors:
                print(f"{error.error_type}: {error.message}")
    """

    # Absolute tolerance for the printed GST comparison (in currency units)
    DEFAULT_TOLERANCE = Decimal('0.01')

    def __init__(self, tolerance: Optional[Decimal] = None):
        """
        Initialize arithmetic checker.

        Args:
            tolerance: Allowed difference between printed and computed GST
        """
        self.tolerance = tolerance if tolerance is not None else self.DEFAULT_TOLERANCE

    def check_record(
        self,
        record: OrderRecord,
        reported_tax: Optional[str] = None,
    ) -> ArithmeticResult:
        """
        Validate the arithmetic of an order record.

        Args:
            record: Assembled OrderRecord
            reported_tax: GST amount printed on the source order, if any

        Returns:
            ArithmeticResult with validation details
        """
        errors: List[CalculationError] = []
        computed_values: Dict[str, Decimal] = {}
        checks_performed = 0

        unit_price = amount_or_zero(record.unit_price)
        shipping = amount_or_zero(record.shipping_cost)
        total = amount_or_zero(record.total_amount)
        tax = amount_or_zero(record.tax_amount)

        # Check 1: unit price + shipping = total
        checks_performed += 1
        expected_total = round2(unit_price + shipping)
        computed_values['computed_total'] = expected_total
        if expected_total != total:
            errors.append(CalculationError(
                error_type=ErrorType.TOTAL_MISMATCH,
                message=f"Total mismatch: {unit_price} + {shipping} = {expected_total}, but total is {total}",
                expected_value=expected_total,
                actual_value=total,
                field_name='total_amount',
                is_critical=True,
            ))

        # Check 2: GST back-calculated from the inclusive total
        checks_performed += 1
        expected_tax = gst_from_inclusive_total(total)
        computed_values['computed_tax'] = expected_tax
        if expected_tax != tax:
            errors.append(CalculationError(
                error_type=ErrorType.TAX_CALCULATION_ERROR,
                message=f"GST mismatch: {total} / 11 = {expected_tax}, but GST is {tax}",
                expected_value=expected_tax,
                actual_value=tax,
                field_name='tax_amount',
                is_critical=True,
            ))

        # Check 3: GST printed on the order
        printed = parse_amount(reported_tax)
        if printed is not None:
            checks_performed += 1
            computed_values['reported_tax'] = printed
            if abs(printed - tax) > self.tolerance:
                errors.append(CalculationError(
                    error_type=ErrorType.REPORTED_TAX_MISMATCH,
                    message=f"Order prints GST {printed} but computed GST is {tax}",
                    expected_value=tax,
                    actual_value=printed,
                    field_name='tax_amount',
                ))

        for error in errors:
            logger.warning(error.message)

        return ArithmeticResult(
            is_valid=len(errors) == 0,
            errors=errors,
            checks_performed=checks_performed,
            computed_values=computed_values,
        )
