"""
Order Invoice

Extracts structured order data from Shopify order PDFs and renders a GST
tax invoice from it.

Features:
- First-page text extraction with pdfplumber
- Spacing-tolerant, independent extraction rules with fallbacks
- GST back-calculated from the tax-inclusive total
- Immutable OrderRecord handed to the HTML invoice renderer

Quick Start:
    from order_invoice import extract_order, process_pdf

    record = process_pdf('order.pdf')
    print(record.total_amount, record.tax_amount)

    # From already-flattened text
    record = extract_order('Order #1001 15 March 2024 $100.00 × 1')

    # Custom settings and rendering
    from order_invoice import InvoicePipeline, HTMLInvoiceRenderer, load_settings

    settings = load_settings('config/invoice.yaml')
    result = InvoicePipeline(settings).process_pdf('order.pdf')
    HTMLInvoiceRenderer(settings).write(result.record, 'invoices')

CLI Usage:
    order-invoice extract order.pdf
    order-invoice render order.pdf -o invoices
"""

__version__ = '1.0.0'

# Errors
from .exceptions import InvoiceError, DocumentReadFailure, ConfigError

# Settings
from .config import (
    InvoiceSettings,
    BusinessDetails,
    ExtractionSettings,
    InvoiceLabels,
    BrandStyle,
    load_settings,
)

# Record
from .record import OrderRecord, assemble

# Validation
from .validation import ShippingMethod, DerivedValues, derive, ArithmeticChecker

# Main pipeline
from .pipeline import InvoicePipeline, InvoiceResult, extract_order, process_pdf

# Rendering
from .render import HTMLInvoiceRenderer, BillingDetails, export_json

__all__ = [
    # Version
    '__version__',

    # Errors
    'InvoiceError',
    'DocumentReadFailure',
    'ConfigError',

    # Settings
    'InvoiceSettings',
    'BusinessDetails',
    'ExtractionSettings',
    'InvoiceLabels',
    'BrandStyle',
    'load_settings',

    # Record
    'OrderRecord',
    'assemble',

    # Validation
    'ShippingMethod',
    'DerivedValues',
    'derive',
    'ArithmeticChecker',

    # Main pipeline
    'InvoicePipeline',
    'InvoiceResult',
    'extract_order',
    'process_pdf',

    # Rendering
    'HTMLInvoiceRenderer',
    'BillingDetails',
    'export_json',
]
