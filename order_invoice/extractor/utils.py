"""
Utility functions shared by the document reader.

Real-world PDFs have inconsistent encoding and formatting artifacts
(ligatures, non-breaking spaces, smart quotes). These helpers clean the
text layer up before it reaches the pattern rules, and sniff files before
a PDF library is asked to open them.
"""

import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger


@dataclass
class ReadResult:
    """
    Text recovered from the first page of a source document.

    `text` is the RawText: every fragment on the page joined by single
    spaces, in the order the PDF library produced them.
    """
    text: str
    source: str
    page_count: int = 0
    fragment_count: int = 0
    metadata: dict = field(default_factory=dict)


# Characters that break regex matching when left in the text layer
_REPLACEMENTS = {
    'ﬁ': 'fi',
    'ﬂ': 'fl',
    'ﬀ': 'ff',
    'ﬃ': 'ffi',
    'ﬄ': 'ffl',
    '“': '"', '”': '"',
    '‘': "'", '’': "'",
    '\u00a0': ' ',       # Non-breaking space
    '\u2002': ' ',       # En space
    '\u2003': ' ',       # Em space
    '\u2009': ' ',       # Thin space
    '\u202f': ' ',       # Narrow no-break space
}


def clean_unicode(text: str) -> str:
    """
    Normalize the unicode representation of extracted text.

    - NFC composition ("e" + combining accent becomes "é")
    - Ligatures expanded
    - Smart quotes and exotic spaces replaced

    Whitespace runs and casing are left untouched.
    """
    if not text:
        return ""

    text = unicodedata.normalize('NFC', text)
    for char, replacement in _REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text


def get_pdf_info(pdf_path: Path) -> dict[str, Any]:
    """
    Extract basic metadata from a PDF file.

    This is a lightweight check that doesn't parse the PDF. It reads only
    the file header so that obviously wrong uploads fail fast.
    """
    info = {
        'path': str(pdf_path),
        'filename': pdf_path.name,
        'size_bytes': 0,
        'exists': False,
        'readable': False,
    }

    try:
        if pdf_path.exists():
            info['exists'] = True
            info['size_bytes'] = pdf_path.stat().st_size
            info['size_mb'] = round(info['size_bytes'] / (1024 * 1024), 2)

            with open(pdf_path, 'rb') as f:
                info['readable'] = is_pdf_header(f.read(8))
                if not info['readable']:
                    info['error'] = 'File does not appear to be a valid PDF'
        else:
            info['error'] = 'File not found'
    except OSError as e:
        logger.warning(f"Could not inspect {pdf_path}: {e}")
        info['error'] = str(e)

    return info


def is_pdf_header(data: bytes) -> bool:
    """Check for the %PDF magic bytes."""
    return data[:4] == b'%PDF'
