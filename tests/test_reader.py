"""
Tests for the PDF text reader.

pdfplumber is replaced with a fake so no real PDFs are needed.
"""

import pytest

from order_invoice.exceptions import DocumentReadFailure
from order_invoice.extractor import PDFTextReader, clean_unicode, get_pdf_info, read_first_page_text
from order_invoice.extractor import pdf_text
from order_invoice.pipeline import InvoicePipeline

PDF_BYTES = b'%PDF-1.7\n% fake body\n'


class FakePage:
    def __init__(self, words):
        self.words = words

    def extract_words(self, **kwargs):
        return [{'text': w} for w in self.words]


class FakePDF:
    def __init__(self, pages):
        self.pages = pages

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_pdfplumber(monkeypatch):
    """Patch pdfplumber.open to serve the given pages."""
    def install(pages=None, error=None):
        opened = []

        def fake_open(source):
            opened.append(source)
            if error is not None:
                raise error
            return FakePDF(pages or [])

        monkeypatch.setattr(pdf_text.pdfplumber, 'open', fake_open)
        return opened

    return install


@pytest.fixture
def pdf_file(tmp_path):
    path = tmp_path / "order.pdf"
    path.write_bytes(PDF_BYTES)
    return path


class TestCleanUnicode:
    """Tests for text layer clean-up."""

    def test_ligatures(self):
        assert clean_unicode("Oﬃce") == "Office"

    def test_non_breaking_spaces(self):
        assert clean_unicode("$\u00a045.00\u2009x") == "$ 45.00 x"

    def test_smart_quotes(self):
        assert clean_unicode("\u201cVase\u201d") == '"Vase"'

    def test_empty(self):
        assert clean_unicode("") == ""


class TestGetPdfInfo:
    """Tests for PDF sniffing."""

    def test_valid_header(self, pdf_file):
        info = get_pdf_info(pdf_file)
        assert info['exists'] and info['readable']

    def test_missing(self, tmp_path):
        info = get_pdf_info(tmp_path / "nope.pdf")
        assert not info['readable']
        assert info['error'] == 'File not found'

    def test_not_a_pdf(self, tmp_path):
        path = tmp_path / "order.pdf"
        path.write_text("hello")
        info = get_pdf_info(path)
        assert not info['readable']
        assert 'valid PDF' in info['error']


class TestPDFTextReader:
    """Tests for first-page reading."""

    def setup_method(self):
        self.reader = PDFTextReader()

    def test_reads_first_page_only(self, fake_pdfplumber, pdf_file):
        fake_pdfplumber(pages=[
            FakePage(['Order', '#1001', '15', 'March', '2024']),
            FakePage(['Order', '#9999']),
        ])

        result = self.reader.read_first_page(pdf_file)

        assert result.text == 'Order #1001 15 March 2024'
        assert result.page_count == 2
        assert result.fragment_count == 5
        assert result.source == str(pdf_file)

    def test_missing_file(self, fake_pdfplumber, tmp_path):
        opened = fake_pdfplumber(pages=[FakePage([])])

        with pytest.raises(DocumentReadFailure) as exc_info:
            self.reader.read_first_page(tmp_path / "missing.pdf")

        assert exc_info.value.reason == 'File not found'
        assert opened == []

    def test_not_a_pdf(self, fake_pdfplumber, tmp_path):
        path = tmp_path / "order.pdf"
        path.write_text("not a pdf")
        opened = fake_pdfplumber(pages=[FakePage([])])

        with pytest.raises(DocumentReadFailure):
            self.reader.read_first_page(path)
        assert opened == []

    def test_no_pages(self, fake_pdfplumber, pdf_file):
        fake_pdfplumber(pages=[])

        with pytest.raises(DocumentReadFailure) as exc_info:
            self.reader.read_first_page(pdf_file)
        assert exc_info.value.reason == 'Document has no pages'

    def test_library_error_is_wrapped(self, fake_pdfplumber, pdf_file):
        error = ValueError("broken xref table")
        fake_pdfplumber(error=error)

        with pytest.raises(DocumentReadFailure) as exc_info:
            self.reader.read_first_page(pdf_file)

        assert exc_info.value.last_error is error
        assert 'broken xref table' in str(exc_info.value)

    def test_read_bytes(self, fake_pdfplumber):
        fake_pdfplumber(pages=[FakePage(['Order', '#7'])])

        result = self.reader.read_bytes(PDF_BYTES, 'upload.pdf')
        assert result.text == 'Order #7'
        assert result.source == 'upload.pdf'

    def test_read_bytes_rejects_non_pdf(self):
        with pytest.raises(DocumentReadFailure):
            self.reader.read_bytes(b'GIF89a', 'image.gif')

        with pytest.raises(DocumentReadFailure):
            self.reader.read_bytes(b'')


class TestPipelineReading:
    """DocumentReadFailure is the only error the pipeline surfaces."""

    def test_process_pdf(self, fake_pdfplumber, pdf_file):
        fake_pdfplumber(pages=[FakePage(
            'Order #1001 15 March 2024 $45.00 × 1 Shipping Fresh Courier Delivery $19.00'.split()
        )])

        result = InvoicePipeline().process_pdf(pdf_file)
        assert result.record.total_amount == '64.00'
        assert result.source == str(pdf_file)

    def test_process_upload_failure(self):
        with pytest.raises(DocumentReadFailure):
            InvoicePipeline().process_upload(b'not a pdf', 'order.pdf')

    def test_read_first_page_text(self, fake_pdfplumber, pdf_file):
        fake_pdfplumber(pages=[FakePage(['Order', '#1001'])])
        assert read_first_page_text(pdf_file) == 'Order #1001'
