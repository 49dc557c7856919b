"""
Extractor Package

The document-reading collaborator: turns an uploaded order PDF into the
flat RawText string consumed by the parser.

Usage:
    from order_invoice.extractor import PDFTextReader

    reader = PDFTextReader()
    result = reader.read_first_page(Path("order.pdf"))
    print(result.text)
"""

from .pdf_text import PDFTextReader, read_first_page_text
from .utils import ReadResult, clean_unicode, get_pdf_info, is_pdf_header

__all__ = [
    'PDFTextReader',
    'ReadResult',
    'read_first_page_text',
    'clean_unicode',
    'get_pdf_info',
    'is_pdf_header',
]
