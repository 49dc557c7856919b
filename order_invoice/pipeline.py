"""
Order Invoice Pipeline

Main orchestration module that runs one document through every stage:

    RawText -> normalize -> FieldMapper -> derive -> assemble -> OrderRecord

Each call is a single stateless pass. Intermediates (normalized text,
extracted fields, derived values) belong to that call only, so
overlapping uploads never share state. Only DocumentReadFailure escapes;
every field-level miss is resolved by a fallback.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from .config import InvoiceSettings
from .extractor.pdf_text import PDFTextReader
from .parser.field_mapper import ExtractedField, FieldMapper
from .parser.normalizers import normalize
from .parser.rules import REPORTED_TAX
from .record import OrderRecord, assemble
from .validation.arithmetic_checks import ArithmeticChecker, ArithmeticResult
from .validation.calculator import derive


@dataclass
class InvoiceResult:
    """Result from processing a single order document."""

    record: OrderRecord
    source: str
    fields: list[ExtractedField] = field(default_factory=list)
    arithmetic: Optional[ArithmeticResult] = None
    warnings: list[str] = field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def fallback_fields(self) -> list[str]:
        """Names of fields that took their default value."""
        return [f.name for f in self.fields if f.is_fallback]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            'source': self.source,
            'record': self.record.to_dict(),
            'fields': {
                f.name: {'value': f.value, 'method': f.method, 'rule': f.rule}
                for f in self.fields
            },
            'arithmetic': self.arithmetic.to_dict() if self.arithmetic else None,
            'warnings': self.warnings,
            'processing_time_ms': round(self.processing_time_ms, 2),
        }


class InvoicePipeline:
    """
    Turns an order document into an OrderRecord.

    Usage:
        pipeline = InvoicePipeline(load_settings(Path("config/invoice.yaml")))
        result = pipeline.process_pdf(Path("order.pdf"))
        print(result.record.total_amount, result.record.tax_amount)
    """

    def __init__(
        self,
        settings: Optional[InvoiceSettings] = None,
        reader: Optional[PDFTextReader] = None,
    ):
        """
        Initialize pipeline.

        Args:
            settings: Invoice settings (defaults if omitted)
            reader: Document reader (pdfplumber-based by default)
        """
        self.settings = settings or InvoiceSettings()
        self.reader = reader or PDFTextReader()
        self.field_mapper = FieldMapper(settings=self.settings.extraction)
        self.checker = ArithmeticChecker()

    def process_text(self, raw: str, source: str = '<text>') -> InvoiceResult:
        """
        Extract an OrderRecord from RawText.

        Never raises for missing or malformed fields.

        Args:
            raw: Flattened first-page text of the order
            source: Label used in logs and results

        Returns:
            InvoiceResult holding the record and extraction trace
        """
        start_time = time.time()

        text = normalize(raw)
        extracted = self.field_mapper.extract_fields(text)
        fields = {f.name: f.value for f in extracted if f.is_valid}

        derived = derive(fields, self.settings.labels)
        record = assemble(fields, derived, self.settings)

        arithmetic = self.checker.check_record(record, reported_tax=fields.get(REPORTED_TAX))

        warnings = [w for f in extracted for w in f.warnings]
        warnings.extend(arithmetic.warnings)

        processing_time = (time.time() - start_time) * 1000
        logger.info(
            f"Extracted order '{record.order_number}' from {source}: "
            f"total {record.total_amount}, GST {record.tax_amount}"
        )

        return InvoiceResult(
            record=record,
            source=source,
            fields=extracted,
            arithmetic=arithmetic,
            warnings=warnings,
            processing_time_ms=processing_time,
        )

    def process_pdf(self, pdf_path: Path) -> InvoiceResult:
        """
        Read the first page of a PDF and extract its OrderRecord.

        Raises:
            DocumentReadFailure: If the PDF cannot be read
        """
        read = self.reader.read_first_page(Path(pdf_path))
        return self.process_text(read.text, source=read.source)

    def process_upload(self, data: bytes, name: str = '<upload>') -> InvoiceResult:
        """
        Extract an OrderRecord from uploaded PDF bytes.

        Raises:
            DocumentReadFailure: If the bytes are not a readable PDF
        """
        read = self.reader.read_bytes(data, name)
        return self.process_text(read.text, source=read.source)


def extract_order(raw: str, settings: Optional[InvoiceSettings] = None) -> OrderRecord:
    """
    Quick function to extract an OrderRecord from RawText.
    """
    return InvoicePipeline(settings).process_text(raw).record


def process_pdf(pdf_path: Path, settings: Optional[InvoiceSettings] = None) -> OrderRecord:
    """
    Quick function to extract an OrderRecord from a PDF file.

    Raises:
        DocumentReadFailure: If the PDF cannot be read
    """
    return InvoicePipeline(settings).process_pdf(pdf_path)
