"""
Render Package

The rendering collaborator: turns an OrderRecord into documents.

Usage:
    from order_invoice.render import HTMLInvoiceRenderer, BillingDetails

    renderer = HTMLInvoiceRenderer(settings)
    renderer.write(record, Path('invoices'), BillingDetails(contact_name='Jane'))
"""

from .html_invoice import HTMLInvoiceRenderer, BillingDetails
from .json_export import export_json, record_to_json

__all__ = [
    'HTMLInvoiceRenderer',
    'BillingDetails',
    'export_json',
    'record_to_json',
]
