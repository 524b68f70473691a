"""Document text extraction for prompt context.

Transforms uploaded PDF documents into page-ordered plain text.

Responsibilities:
    - PDF text extraction with pypdf
    - Upload validation (header, size, readability)
    - Page boundary markers so answers can cite pages

Output is a single text blob attached to the next message the user sends.
"""

from docuchat.parsing.pdf_parser import (
    CorruptDocumentError,
    ExtractionError,
    PDFContent,
    UnsupportedFormatError,
    extract_text,
    parse_pdf,
)

__all__ = [
    "CorruptDocumentError",
    "ExtractionError",
    "PDFContent",
    "UnsupportedFormatError",
    "extract_text",
    "parse_pdf",
]
