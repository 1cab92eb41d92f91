"""PDF text extraction."""

from statement_converter.pdf_processor.extractor import ExtractedText, PDFExtractionError, TextExtractor

__all__ = ["ExtractedText", "PDFExtractionError", "TextExtractor"]
