"""
PDF Text Layer Reader

Reads the native text layer of the first page of an order PDF with
pdfplumber and flattens it into RawText.

The page's word fragments are joined with single spaces in the order
pdfplumber yields them. No positions or fonts are kept; the extraction
rules downstream work on the flat string only. Only page 1 is read:
each uploaded document carries exactly one order.

Any failure to open or decode the document surfaces as a single
DocumentReadFailure. Retrying a malformed document is not useful, so
there is no retry.
"""

import io
from pathlib import Path
from typing import Union

import pdfplumber
from loguru import logger

from ..exceptions import DocumentReadFailure
from .utils import ReadResult, clean_unicode, get_pdf_info, is_pdf_header


class PDFTextReader:
    """
    Reads RawText from the first page of a PDF.

    Usage:
        reader = PDFTextReader()
        result = reader.read_first_page(Path("order.pdf"))
        print(result.text)
    """

    def __init__(self, x_tolerance: float = 3, y_tolerance: float = 3):
        """
        Initialize the reader.

        Args:
            x_tolerance: Horizontal gap (pt) below which characters join into one word
            y_tolerance: Vertical gap (pt) below which characters share a line
        """
        self.x_tolerance = x_tolerance
        self.y_tolerance = y_tolerance

    def read_first_page(self, pdf_path: Path) -> ReadResult:
        """
        Read the first page of a PDF file.

        Args:
            pdf_path: Path to the PDF file

        Returns:
            ReadResult holding the RawText

        Raises:
            DocumentReadFailure: If the file is missing, not a PDF, or unreadable
        """
        pdf_path = Path(pdf_path)
        info = get_pdf_info(pdf_path)
        if not info['readable']:
            raise DocumentReadFailure(str(pdf_path), info.get('error', 'Cannot read PDF file'))

        logger.info(f"Reading: {pdf_path.name} ({info.get('size_mb', 0)} MB)")
        return self._read(pdf_path, str(pdf_path))

    def read_bytes(self, data: bytes, name: str = '<upload>') -> ReadResult:
        """
        Read the first page of an in-memory PDF (e.g. a browser upload).

        Raises:
            DocumentReadFailure: If the bytes are not a readable PDF
        """
        if not data or not is_pdf_header(data):
            raise DocumentReadFailure(name, 'File does not appear to be a valid PDF')

        logger.info(f"Reading upload: {name} ({len(data)} bytes)")
        return self._read(io.BytesIO(data), name)

    def _read(self, source: Union[Path, io.BytesIO], name: str) -> ReadResult:
        """Open with pdfplumber and flatten page 1."""
        try:
            with pdfplumber.open(source) as pdf:
                page_count = len(pdf.pages)
                if page_count == 0:
                    raise DocumentReadFailure(name, 'Document has no pages')

                words = pdf.pages[0].extract_words(
                    x_tolerance=self.x_tolerance,
                    y_tolerance=self.y_tolerance,
                    keep_blank_chars=False,
                )
        except DocumentReadFailure:
            raise
        except Exception as e:
            logger.error(f"pdfplumber could not read {name}: {e}")
            raise DocumentReadFailure(name, str(e), last_error=e) from e

        fragments = [w['text'] for w in words if w.get('text')]
        text = clean_unicode(' '.join(fragments))

        if page_count > 1:
            logger.debug(f"{name} has {page_count} pages; only page 1 is read")
        logger.debug(f"Read {len(fragments)} fragments from {name}")

        return ReadResult(
            text=text,
            source=name,
            page_count=page_count,
            fragment_count=len(fragments),
            metadata={'backend': 'pdfplumber'},
        )


def read_first_page_text(pdf_path: Path) -> str:
    """
    Convenience function returning only the RawText of page 1.
    """
    return PDFTextReader().read_first_page(pdf_path).text
