"""Text extraction from PDF bank statements."""

import io
import os
from typing import NamedTuple, Optional

import pdfplumber
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from statement_converter.utils.logger import get_logger
from statement_converter.utils.validators import validate_pdf_file


class PDFExtractionError(Exception):
    """Custom exception for PDF extraction errors."""

    code = "PDF_PARSE_ERROR"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class PDFPasswordProtectedError(PDFExtractionError):
    """Raised when the document needs a password to open."""

    code = "PDF_PASSWORD_PROTECTED"


class PDFCorruptedError(PDFExtractionError):
    """Raised when the document bytes are damaged or not a PDF."""

    code = "PDF_CORRUPTED"


class PDFStructureError(PDFExtractionError):
    """Raised when the cross-reference table cannot be read."""

    code = "PDF_STRUCTURE_ERROR"


class PDFTimeoutError(PDFExtractionError):
    """Raised when extraction does not finish in time."""

    code = "PDF_TIMEOUT"


class ExtractedText(NamedTuple):
    text: str
    page_count: int


def classify_extraction_error(exc: Exception) -> PDFExtractionError:
    """Map a raw PDF library error onto a coded extraction error.

    Args:
        exc: Exception raised by PyPDF2 or pdfplumber.

    Returns:
        The matching :class:`PDFExtractionError` subclass instance. Coded
        errors are returned unchanged.
    """
    if isinstance(exc, PDFExtractionError):
        return exc

    message = str(exc)
    haystack = f"{type(exc).__name__} {message}".lower()

    if any(keyword in haystack for keyword in ("password", "encrypt", "decrypt")):
        return PDFPasswordProtectedError(f"PDF is password protected: {message}")
    if "xref" in haystack:
        return PDFStructureError(f"PDF structure is damaged: {message}")
    if "corrupt" in haystack or "invalid" in haystack or "eof" in haystack:
        return PDFCorruptedError(f"PDF file is corrupted: {message}")
    return PDFExtractionError(f"Failed to parse PDF: {message}")


class TextExtractor:
    """Extracts plain text from PDF documents held in memory or on disk."""

    def __init__(self) -> None:
        """Initialize text extractor."""
        self.logger = get_logger(__name__)

    def check_encryption(self, document: bytes) -> None:
        """Reject documents that cannot be opened without a password.

        Documents encrypted with an empty user password are accepted.

        Raises:
            PDFPasswordProtectedError: If a password is required.
            PDFExtractionError: If the document cannot be read at all.
        """
        try:
            reader = PdfReader(io.BytesIO(document))
            if not reader.is_encrypted:
                return
            if reader.decrypt(""):
                self.logger.debug("Opened encrypted PDF with empty password")
                return
        except PdfReadError as e:
            raise classify_extraction_error(e) from e

        raise PDFPasswordProtectedError("PDF is password protected")

    def extract(self, document: bytes) -> ExtractedText:
        """Extract the text of every page.

        Args:
            document: Raw PDF bytes.

        Returns:
            ExtractedText holding the page texts joined by newlines and the
            page count.

        Raises:
            PDFExtractionError: Or one of its subclasses, carrying the error
                code for the failure.
        """
        if not document:
            raise PDFCorruptedError("PDF file is empty")

        self.check_encryption(document)

        try:
            page_texts = []
            with pdfplumber.open(io.BytesIO(document), password="") as pdf:
                page_count = len(pdf.pages)
                for page_num, page in enumerate(pdf.pages, 1):
                    page_text = page.extract_text()
                    if page_text:
                        page_texts.append(page_text)
                        self.logger.debug(f"Extracted text from page {page_num}")
                    else:
                        self.logger.warning(f"No text found on page {page_num}")
        except Exception as e:
            raise classify_extraction_error(e) from e

        text = "\n".join(page_texts)
        self.logger.info(f"Extracted {len(text)} characters from {page_count} pages")
        return ExtractedText(text=text, page_count=page_count)

    def extract_file(self, pdf_path: str, max_size_mb: Optional[int] = None) -> ExtractedText:
        """Validate a PDF file on disk and extract its text.

        Raises:
            ValidationError: If the file is missing, empty, too large or not
                a PDF.
            PDFExtractionError: If extraction fails.
        """
        if max_size_mb is None:
            validate_pdf_file(pdf_path)
        else:
            validate_pdf_file(pdf_path, max_size_mb=max_size_mb)

        with open(pdf_path, "rb") as f:
            document = f.read()

        self.logger.info(f"Extracting text from {os.path.basename(pdf_path)}")
        return self.extract(document)
