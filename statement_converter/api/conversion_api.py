"""API interface for statement conversion requests."""

import asyncio
import os
import uuid
from typing import Any, Dict, List, Optional

from statement_converter.config.settings import ANONYMOUS_USER_ID, SUPPORTED_MIME_TYPES, Settings
from statement_converter.exporters.csv_exporter import CSVExporter
from statement_converter.monitoring.health_checker import HealthChecker
from statement_converter.parser.engine import StatementParser
from statement_converter.pdf_processor.extractor import (
    ExtractedText,
    PDFExtractionError,
    PDFTimeoutError,
    TextExtractor,
)
from statement_converter.storage.history_store import ConversionRecord, HistoryStore, create_history_store
from statement_converter.utils.logger import ConversionLogger, get_logger
from statement_converter.utils.validators import ValidationError, validate_uploaded_file


ERROR_TITLES = {
    "PDF_TIMEOUT": "PDF processing timeout",
    "PDF_PASSWORD_PROTECTED": "Password protected PDF",
    "PDF_CORRUPTED": "Corrupted PDF",
    "PDF_STRUCTURE_ERROR": "Invalid PDF structure",
    "PDF_PARSE_ERROR": "PDF parsing failed",
    "NO_TEXT_EXTRACTED": "No text found",
    "INSUFFICIENT_TEXT": "Insufficient text content",
    "PROCESSING_ERROR": "Processing failed",
}


def error_response(code: str, message: str, error: Optional[str] = None, details: Optional[str] = None) -> Dict[str, Any]:
    """Build a failure response body."""
    response = {
        "success": False,
        "error": error or ERROR_TITLES.get(code, "Conversion failed"),
        "code": code,
        "message": message,
    }
    if details:
        response["details"] = details
    return response


def converted_filename(original_filename: str) -> str:
    stem, _ = os.path.splitext(os.path.basename(original_filename))
    return f"{stem}_converted.csv"


class ConversionAPI:
    """Upload-to-CSV conversion service.

    One instance serves concurrent requests. Each call to
    :meth:`convert_document` runs the extractor in the default executor and
    abandons it if it does not finish within ``extraction_timeout_seconds``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        history_store: Optional[HistoryStore] = None,
        extractor: Optional[TextExtractor] = None
    ):
        """Initialize the conversion API.

        Args:
            settings: Service settings. Defaults to ``Settings()``.
            history_store: Conversion history backend. Defaults to the one
                selected by ``settings.history_backend``.
            extractor: PDF text extractor.
        """
        self.settings = settings or Settings()
        self.logger = get_logger(self.__class__.__name__)

        self.extractor = extractor or TextExtractor()
        self.parser = StatementParser(self.settings)
        self.csv_exporter = CSVExporter(self.settings.header_style)
        self.history_store = history_store or create_history_store(self.settings)
        self.health_checker = HealthChecker(self.settings)

    async def convert_document(
        self,
        filename: Optional[str],
        content: Optional[bytes],
        mimetype: Optional[str] = "application/pdf",
        user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Convert an uploaded statement PDF to CSV.

        Args:
            filename: Original filename of the upload.
            content: Uploaded bytes, or None when nothing was uploaded.
            mimetype: Declared content type.
            user_id: Owner of the conversion. Anonymous when omitted.

        Returns:
            Success body with ``filename``, ``csvData``, ``transactionCount``,
            ``originalFilename``, ``usedSampleData`` and ``conversionId``, or
            a failure body with ``error``, ``code`` and ``message``.
        """
        user_id = user_id or ANONYMOUS_USER_ID
        conversion_log = ConversionLogger(uuid.uuid4().hex[:8], self.logger)

        try:
            validate_uploaded_file(
                filename,
                None if content is None else len(content),
                mimetype,
                max_size_mb=self.settings.max_file_size_mb,
                supported_mime_types=SUPPORTED_MIME_TYPES,
            )
        except ValidationError as e:
            self.logger.warning(f"Rejected upload {filename!r}: {e.code}")
            return error_response(e.code, e.message, error=e.error)

        conversion_log.log_start(filename, len(content))

        try:
            extracted = await self._extract_async(content)
        except PDFExtractionError as e:
            conversion_log.log_progress(f"Extraction failed with {e.code}")
            return error_response(e.code, e.message, details=str(e.__cause__) if e.__cause__ else None)
        except Exception as e:
            conversion_log.log_error(e, "extraction")
            return error_response("PROCESSING_ERROR", "Failed to process the PDF file", details=str(e))

        text = extracted.text
        if not text or not text.strip():
            return error_response(
                "NO_TEXT_EXTRACTED",
                "The PDF does not contain readable text. It may be a scanned image.",
            )
        if len(text.strip()) < self.settings.min_text_length:
            return error_response(
                "INSUFFICIENT_TEXT",
                "The PDF does not contain enough text to be a bank statement",
            )

        conversion_log.log_progress(f"Extracted {len(text)} characters from {extracted.page_count} pages")

        try:
            result = self.parser.parse_extracted(text, extracted.page_count)
            csv_data = self.csv_exporter.to_csv(result.transactions)
        except Exception as e:
            conversion_log.log_error(e, "parsing")
            return error_response("PROCESSING_ERROR", "Failed to convert the statement", details=str(e))

        output_filename = converted_filename(filename)
        conversion_id = self._save_history(
            ConversionRecord(
                user_id=user_id,
                original_filename=filename,
                converted_filename=output_filename,
                csv_data=csv_data,
                transaction_count=result.transaction_count,
                used_sample_data=result.used_sample_data,
            )
        )

        conversion_log.log_completion(output_filename, result.transaction_count)
        return {
            "success": True,
            "filename": output_filename,
            "csvData": csv_data,
            "transactionCount": result.transaction_count,
            "originalFilename": filename,
            "usedSampleData": result.used_sample_data,
            "conversionId": conversion_id,
        }

    async def _extract_async(self, content: bytes) -> ExtractedText:
        """Run extraction in the default executor, bounded by the timeout."""
        loop = asyncio.get_running_loop()
        timeout = self.settings.extraction_timeout_seconds

        try:
            return await asyncio.wait_for(
                loop.run_in_executor(None, self.extractor.extract, content),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            raise PDFTimeoutError(f"PDF processing timed out after {timeout} seconds")

    def _save_history(self, record: ConversionRecord) -> Optional[str]:
        try:
            self.history_store.save(record)
        except Exception as e:
            self.logger.warning(f"Failed to save conversion history: {e}")
            return None
        return record.conversion_id

    def get_history(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """List a user's conversions, newest first."""
        records = self.history_store.list_for_user(user_id or ANONYMOUS_USER_ID)
        return [record.to_dict() for record in records]

    def get_conversion(self, user_id: Optional[str], conversion_id: str) -> Optional[Dict[str, Any]]:
        record = self.history_store.get(user_id or ANONYMOUS_USER_ID, conversion_id)
        return record.to_dict() if record else None

    def delete_conversion(self, user_id: Optional[str], conversion_id: str) -> bool:
        deleted = self.history_store.delete(user_id or ANONYMOUS_USER_ID, conversion_id)
        if deleted:
            self.logger.info(f"Deleted conversion {conversion_id}")
        return deleted

    def health_check(self) -> Dict[str, Any]:
        """Perform health check."""
        return self.health_checker.run_health_check()
