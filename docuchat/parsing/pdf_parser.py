"""PDF text extraction using pypdf.

Turns uploaded PDF bytes into page-ordered plain text with a ``Page N: `` prefix
per page, so the generative service can attribute context by page.
"""

import asyncio
import io
import logging

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"
PAGE_PREFIX = "Page {number}: "


class PDFContent(BaseModel):
    """Extracted content from a PDF file.

    Attributes:
        text: Page-ordered text, one ``Page N: `` line per page.
        pages: Total number of pages in the document.
    """

    text: str
    pages: int = Field(ge=0)


class ExtractionError(Exception):
    """Raised when a document cannot be turned into text."""

    pass


class UnsupportedFormatError(ExtractionError):
    """The upload is not a PDF the extractor accepts."""


class CorruptDocumentError(ExtractionError):
    """The upload looks like a PDF but cannot be read."""


def _validate_pdf_bytes(file_content: bytes) -> None:
    """Validate PDF file content before parsing.

    Args:
        file_content: Raw bytes of the PDF file.

    Raises:
        UnsupportedFormatError: If the bytes are empty, too large, or not a PDF.
    """
    if not file_content:
        raise UnsupportedFormatError("Empty file provided")

    if len(file_content) > MAX_FILE_SIZE:
        size_mb = len(file_content) / (1024 * 1024)
        raise UnsupportedFormatError(
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)"
        )

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise UnsupportedFormatError("Invalid PDF: file does not start with PDF header")


def _page_text(page, number: int) -> str:
    try:
        raw = page.extract_text() or ""
    except Exception as e:
        logger.warning(f"Failed to extract text from page {number}: {e}")
        raw = ""
    # Layout is not preserved; collapse runs of whitespace like a text layer join
    return " ".join(raw.split())


def parse_pdf(file_content: bytes) -> PDFContent:
    """Parse a PDF file and extract its text content page by page.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        PDFContent with page-prefixed text and page count.

    Raises:
        UnsupportedFormatError: If the file is empty, too large, or not a PDF.
        CorruptDocumentError: If the PDF cannot be read or has no pages.
    """
    _validate_pdf_bytes(file_content)

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise CorruptDocumentError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise CorruptDocumentError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise CorruptDocumentError("PDF contains no pages")

    page_texts = [_page_text(page, i + 1) for i, page in enumerate(reader.pages)]
    text = "\n".join(
        PAGE_PREFIX.format(number=i + 1) + page_text
        for i, page_text in enumerate(page_texts)
    )

    if not any(page_texts):
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")

    return PDFContent(text=text, pages=pages)


async def extract_text(file_content: bytes) -> str:
    """Extract page-ordered text from PDF bytes without blocking the event loop.

    Raises:
        ExtractionError: If the document is unsupported or corrupt.
    """
    content = await asyncio.to_thread(parse_pdf, file_content)
    logger.debug(f"Extracted {len(content.text)} characters from {content.pages} pages")
    return content.text
