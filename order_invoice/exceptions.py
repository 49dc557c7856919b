"""Custom exceptions for order_invoice."""

from typing import Optional


class InvoiceError(Exception):
    """Base exception for all order_invoice errors."""

    pass


class DocumentReadFailure(InvoiceError):
    """
    Raised when a source document cannot be decoded into text.

    This is the only failure surfaced to callers of the pipeline. Field
    misses and missing numbers are resolved with fallbacks instead.
    """

    def __init__(self, source: str, reason: str, last_error: Optional[Exception] = None):
        super().__init__(f"Failed to read {source}: {reason}")
        self.source = source
        self.reason = reason
        self.last_error = last_error


class ConfigError(InvoiceError):
    """Raised when an invoice settings file is invalid."""

    pass
