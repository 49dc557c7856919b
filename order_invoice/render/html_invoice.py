"""
HTML Tax Invoice Renderer

Renders an OrderRecord into a fixed-layout, printable tax invoice:

- Business identity block (from settings, never from the order)
- Invoice metadata (date, invoice number)
- Optional "BILLED TO" block
- Line-item table: product, shipping, GST, total

The output is a standalone HTML page with inline styles, suitable for
printing to PDF from a browser.
"""

from __future__ import annotations

import base64
import html
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import InvoiceSettings
from ..record import OrderRecord

logger = logging.getLogger(__name__)


_IMAGE_TYPES = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.svg': 'image/svg+xml',
}


@dataclass(frozen=True)
class BillingDetails:
    """Who the invoice is billed to. Every part is optional."""

    company_name: str = ''
    contact_name: str = ''
    email: str = ''

    @property
    def lines(self) -> list[str]:
        return [
            line for line in (self.company_name, self.contact_name, self.email)
            if line and line.strip()
        ]

    @property
    def is_empty(self) -> bool:
        return not self.lines


class HTMLInvoiceRenderer:
    """
    Generates printable HTML tax invoices.

    Usage:
        renderer = HTMLInvoiceRenderer(settings)

        # Render to a string
        page = renderer.render(record, BillingDetails(contact_name='Jane Smith'))

        # Write Invoice_<order>.html into a directory
        path = renderer.write(record, Path('invoices'))
    """

    def __init__(self, settings: Optional[InvoiceSettings] = None):
        """
        Initialize renderer.

        Args:
            settings: Business identity, labels and brand styling
        """
        self.settings = settings or InvoiceSettings()

    def document_name(self, record: OrderRecord) -> str:
        """Output document identifier for a record."""
        return record.document_name(self.settings.labels.document_prefix)

    def render(
        self,
        record: OrderRecord,
        billing: Optional[BillingDetails] = None,
    ) -> str:
        """
        Render a record to an HTML page.

        Args:
            record: The order to invoice
            billing: Optional billed-to details

        Returns:
            HTML document as a string
        """
        business = self.settings.business
        labels = self.settings.labels
        esc = html.escape

        business_lines = [
            business.name,
            business.address,
            f"ABN {business.abn}",
            business.email,
        ]

        rows = [
            self._row(record.description, str(record.quantity), record.unit_price),
            self._row(record.shipping_label, '1', record.shipping_cost),
            self._summary_row(labels.tax, record.tax_amount),
            self._summary_row(labels.total, record.total_amount, css_class='total'),
        ]

        billing_block = ''
        if billing is not None and not billing.is_empty:
            billing_block = f'''
        <section class="billed-to">
            <p class="label">BILLED TO:</p>
            {''.join(f'<p>{esc(line)}</p>' for line in billing.lines)}
        </section>'''

        return f'''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{esc(self.document_name(record))}</title>
    <style>
        {self._get_styles()}
    </style>
</head>
<body>
    <div class="invoice">
        {self._logo_tag()}
        <header class="header">
            <div class="business">
                <h1>{esc(labels.title)}</h1>
                {''.join(f'<p>{esc(line)}</p>' for line in business_lines)}
            </div>
            <div class="meta">
                <p>Date: {esc(record.date)}</p>
                <p>Invoice #{esc(record.order_number)}</p>
            </div>
        </header>
        {billing_block}
        <table class="items">
            <thead>
                <tr>
                    <th class="left">Description</th>
                    <th class="left">Qty</th>
                    <th class="right">Price</th>
                </tr>
            </thead>
            <tbody>
                {''.join(rows)}
            </tbody>
        </table>
    </div>
</body>
</html>'''

    def write(
        self,
        record: OrderRecord,
        output_dir: Path,
        billing: Optional[BillingDetails] = None,
    ) -> Path:
        """
        Render a record and write it as <document name>.html.

        Returns:
            Path to the written file
        """
        os.makedirs(output_dir, exist_ok=True)
        output_path = Path(output_dir) / f"{self.document_name(record)}.html"

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(self.render(record, billing))

        logger.info(f"Generated invoice: {output_path}")
        return output_path

    def _row(self, description: str, quantity: str, amount: str) -> str:
        esc = html.escape
        return (
            f'<tr><td>{esc(description)}</td><td>{esc(quantity)}</td>'
            f'<td class="right">${esc(amount)}</td></tr>'
        )

    def _summary_row(self, label: str, amount: str, css_class: str = '') -> str:
        esc = html.escape
        class_attr = f' class="{css_class}"' if css_class else ''
        return (
            f'<tr{class_attr}><td colspan="2">{esc(label)}</td>'
            f'<td class="right">${esc(amount)}</td></tr>'
        )

    def _logo_tag(self) -> str:
        """Inline the brand logo as a data URI, or nothing if unavailable."""
        logo_path = self.settings.brand.logo_path
        if logo_path is None:
            return ''

        mime = _IMAGE_TYPES.get(Path(logo_path).suffix.lower())
        if mime is None:
            logger.warning(f"Unsupported logo type: {logo_path}")
            return ''

        try:
            with open(logo_path, 'rb') as f:
                encoded = base64.b64encode(f.read()).decode('ascii')
        except OSError as e:
            logger.warning(f"Could not read logo {logo_path}: {e}")
            return ''

        return f'<img class="logo" src="data:{mime};base64,{encoded}" alt="logo">'

    def _get_styles(self) -> str:
        """Get CSS styles."""
        color = self.settings.brand.color
        return f'''
        * {{
            box-sizing: border-box;
            margin: 0;
            padding: 0;
        }}

        body {{
            font-family: Helvetica, Arial, sans-serif;
            color: #333;
            line-height: 1.5;
        }}

        .invoice {{
            max-width: 800px;
            margin: 0 auto;
            padding: 20px;
        }}

        .logo {{
            width: 160px;
            margin-bottom: 16px;
        }}

        .header {{
            display: flex;
            justify-content: space-between;
            margin-bottom: 24px;
        }}

        .header h1 {{
            font-size: 24px;
            margin-bottom: 8px;
        }}

        .meta {{
            text-align: right;
        }}

        .billed-to {{
            margin-bottom: 24px;
        }}

        .label {{
            font-weight: 500;
        }}

        .items {{
            width: 100%;
            border-collapse: collapse;
            font-size: 14px;
        }}

        .items th {{
            background: {color};
            color: #fff;
            font-weight: bold;
            padding: 8px;
        }}

        .items td {{
            padding: 8px;
        }}

        .items tr.total td {{
            border-top: 1px solid #e5e7eb;
            font-weight: 500;
        }}

        .left {{
            text-align: left;
        }}

        .right {{
            text-align: right;
        }}
        '''
