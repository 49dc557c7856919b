"""
Order Invoice - Command Line Interface

Commands:
    extract     Extract an order record from a Shopify order PDF
    parse-text  Extract an order record from already-flattened text
    render      Extract an order record and write its HTML tax invoice

Examples:

    # Show the extracted record
    order-invoice extract order.pdf

    # Custom settings and a JSON copy of the record
    order-invoice extract order.pdf -c config/invoice.yaml --json order.json

    # Text piped from another tool
    pdftotext -layout order.pdf - | order-invoice parse-text -

    # Write Invoice_<order>.html into ./invoices
    order-invoice render order.pdf -o invoices --company "Acme Pty Ltd"
"""

import sys
from pathlib import Path
from typing import Optional

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import InvoiceSettings, load_settings
from .exceptions import InvoiceError
from .pipeline import InvoicePipeline, InvoiceResult
from .render import BillingDetails, HTMLInvoiceRenderer, export_json


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None):
    """Configure loguru logging."""
    # Remove default handler
    logger.remove()

    # Console logging
    log_level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=log_level,
        colorize=True
    )

    # File logging
    if log_file:
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
            level="DEBUG",
            rotation="10 MB"
        )


def _print_result(result: InvoiceResult, console: Console):
    """Print the extracted record as a table."""
    record = result.record
    fallbacks = set(result.fallback_fields)

    table = Table(title=f"Order #{record.order_number or '?'}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")

    for name, value in record.to_dict().items():
        source = "default" if name in fallbacks else ""
        table.add_row(name, escape(str(value)), source)

    console.print()
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]⚠ {escape(warning)}[/]")


def _load(config_path: Optional[Path], console: Console) -> InvoiceSettings:
    try:
        return load_settings(config_path)
    except InvoiceError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/]")
        raise SystemExit(1)


@click.group()
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Enable verbose logging'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Write logs to file'
)
def cli(verbose: bool, log_file: Optional[Path]):
    """Order Invoice - turn Shopify order PDFs into GST tax invoices."""
    setup_logging(verbose, log_file)


@cli.command()
@click.argument('pdf_path', type=click.Path(path_type=Path))
@click.option(
    '--config', '-c',
    'config_path',
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help='Path to invoice.yaml settings file'
)
@click.option(
    '--json', 'json_path',
    type=click.Path(path_type=Path),
    default=None,
    help='Also write the record as JSON'
)
def extract(pdf_path: Path, config_path: Optional[Path], json_path: Optional[Path]):
    """Extract the order record from PDF_PATH."""
    console = Console()
    settings = _load(config_path, console)

    try:
        result = InvoicePipeline(settings).process_pdf(pdf_path)
    except InvoiceError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/]")
        raise SystemExit(1)

    _print_result(result, console)

    if json_path:
        export_json(result.record, json_path, extra={'source': result.source})
        console.print(f"[green]✓ Record written to: {json_path}[/]")


@cli.command('parse-text')
@click.argument('text_file', type=click.File('r', encoding='utf-8'), default='-')
@click.option(
    '--config', '-c',
    'config_path',
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help='Path to invoice.yaml settings file'
)
def parse_text(text_file, config_path: Optional[Path]):
    """Extract the order record from flattened order text (stdin by default)."""
    console = Console()
    settings = _load(config_path, console)

    raw = text_file.read()
    result = InvoicePipeline(settings).process_text(raw, source=text_file.name)
    _print_result(result, console)


@cli.command()
@click.argument('pdf_path', type=click.Path(path_type=Path))
@click.option(
    '--output-dir', '-o',
    type=click.Path(file_okay=False, path_type=Path),
    default=Path('.'),
    help='Directory for the invoice file'
)
@click.option(
    '--config', '-c',
    'config_path',
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help='Path to invoice.yaml settings file'
)
@click.option('--company', default='', help='Billed-to company name')
@click.option('--contact', default=None, help='Billed-to contact (defaults to the customer)')
@click.option('--email', default=None, help='Billed-to email (defaults to the order email)')
def render(
    pdf_path: Path,
    output_dir: Path,
    config_path: Optional[Path],
    company: str,
    contact: Optional[str],
    email: Optional[str],
):
    """Write the HTML tax invoice for PDF_PATH."""
    console = Console()
    settings = _load(config_path, console)

    try:
        result = InvoicePipeline(settings).process_pdf(pdf_path)
    except InvoiceError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/]")
        raise SystemExit(1)

    record = result.record
    if email is None:
        email = '' if record.email == settings.extraction.no_email_text else record.email
    billing = BillingDetails(
        company_name=company,
        contact_name=record.customer_name if contact is None else contact,
        email=email,
    )

    output_path = HTMLInvoiceRenderer(settings).write(record, output_dir, billing)
    console.print(f"[green]✓ Invoice written to: {output_path}[/]")


if __name__ == "__main__":
    cli()
