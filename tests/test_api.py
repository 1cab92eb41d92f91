"""Tests for the conversion API."""

import asyncio
import time
from unittest.mock import Mock, patch

import pytest

from statement_converter.api.conversion_api import ConversionAPI, converted_filename, error_response
from statement_converter.config.settings import ANONYMOUS_USER_ID
from statement_converter.exporters.csv_exporter import read_csv
from statement_converter.pdf_processor.extractor import (
    ExtractedText,
    PDFPasswordProtectedError,
    TextExtractor,
)
from statement_converter.storage.history_store import HistoryStoreError


PDF_BYTES = b"%PDF-1.4 statement"


@pytest.fixture
def extractor():
    """Create a mock extractor."""
    return Mock(spec=TextExtractor)


@pytest.fixture
def api(sample_settings, history_store, extractor):
    """Create an API wired to mocks."""
    return ConversionAPI(sample_settings, history_store=history_store, extractor=extractor)


def convert(api, filename="statement.pdf", content=PDF_BYTES, mimetype="application/pdf", user_id=None):
    return asyncio.run(api.convert_document(filename, content, mimetype, user_id))


class TestHelpers:
    """Test cases for response helpers."""

    def test_converted_filename(self):
        """Test output filename derivation."""
        assert converted_filename("August Statement.pdf") == "August Statement_converted.csv"
        assert converted_filename("/tmp/in/statement.PDF") == "statement_converted.csv"

    def test_error_response(self):
        """Test failure body shape."""
        body = error_response("PDF_TIMEOUT", "Too slow", details="30s")
        assert body == {
            "success": False,
            "error": "PDF processing timeout",
            "code": "PDF_TIMEOUT",
            "message": "Too slow",
            "details": "30s",
        }


class TestConvertDocument:
    """Test cases for ConversionAPI.convert_document."""

    def test_success(self, api, extractor, statement_text, history_store):
        """Test a successful conversion."""
        extractor.extract.return_value = ExtractedText(statement_text, 1)

        body = convert(api)

        assert body["success"] is True
        assert body["filename"] == "statement_converted.csv"
        assert body["originalFilename"] == "statement.pdf"
        assert body["transactionCount"] == 4
        assert body["usedSampleData"] is False
        assert read_csv(body["csvData"])[0] == ["DATE", "TYPE", "DESCRIPTION", "AMOUNT", "BALANCE"]

        saved = history_store.get(ANONYMOUS_USER_ID, body["conversionId"])
        assert saved.csv_data == body["csvData"]

    def test_sample_data_flag(self, api, extractor):
        """Test that fallback ledgers are flagged."""
        extractor.extract.return_value = ExtractedText("Thank you for banking with us. " * 5, 1)

        body = convert(api)

        assert body["success"] is True
        assert body["usedSampleData"] is True
        assert body["transactionCount"] == 4

    @pytest.mark.parametrize("kwargs,code", [
        ({"content": None}, "NO_FILE"),
        ({"mimetype": "text/plain"}, "INVALID_TYPE"),
        ({"content": b""}, "EMPTY_FILE"),
        ({"filename": "  "}, "INVALID_FILENAME"),
        ({"filename": "statement.exe"}, "SUSPICIOUS_FILE"),
        ({"filename": "a" * 252 + ".pdf"}, "FILENAME_TOO_LONG"),
        ({"filename": "state<ment>.pdf"}, "INVALID_CHARACTERS"),
    ])
    def test_validation_errors(self, api, extractor, kwargs, code):
        """Test upload validation codes."""
        body = convert(api, **kwargs)

        assert body["success"] is False
        assert body["code"] == code
        extractor.extract.assert_not_called()

    def test_file_too_large(self, api, sample_settings):
        """Test the upload size limit."""
        sample_settings.max_file_size_mb = 1
        body = convert(api, content=b"x" * (1024 * 1024 + 1))
        assert body["code"] == "FILE_TOO_LARGE"

    def test_extraction_error(self, api, extractor):
        """Test that extractor codes are surfaced."""
        extractor.extract.side_effect = PDFPasswordProtectedError("PDF is password protected")

        body = convert(api)

        assert body["code"] == "PDF_PASSWORD_PROTECTED"
        assert body["error"] == "Password protected PDF"

    def test_timeout(self, api, extractor, sample_settings):
        """Test extraction that outlives the timeout."""
        sample_settings.extraction_timeout_seconds = 0.05
        extractor.extract.side_effect = lambda content: time.sleep(0.5)

        body = convert(api)
        assert body["code"] == "PDF_TIMEOUT"

    def test_no_text(self, api, extractor):
        """Test documents without a text layer."""
        extractor.extract.return_value = ExtractedText("  \n ", 2)
        assert convert(api)["code"] == "NO_TEXT_EXTRACTED"

    def test_insufficient_text(self, api, extractor):
        """Test documents with too little text."""
        extractor.extract.return_value = ExtractedText("Aug 1, 2025 Groceries $4.50", 1)
        assert convert(api)["code"] == "INSUFFICIENT_TEXT"

    def test_unexpected_error(self, api, extractor):
        """Test unexpected extractor failures."""
        extractor.extract.side_effect = RuntimeError("boom")

        body = convert(api)

        assert body["code"] == "PROCESSING_ERROR"
        assert body["details"] == "boom"

    def test_history_failure_is_not_fatal(self, api, extractor, statement_text):
        """Test conversions still succeed when history cannot be saved."""
        extractor.extract.return_value = ExtractedText(statement_text, 1)
        api.history_store = Mock()
        api.history_store.save.side_effect = HistoryStoreError("down")

        body = convert(api)

        assert body["success"] is True
        assert body["conversionId"] is None


class TestHistory:
    """Test cases for history access through the API."""

    def test_history_round_trip(self, api, extractor, statement_text):
        """Test listing, loading and deleting conversions."""
        extractor.extract.return_value = ExtractedText(statement_text, 1)
        body = convert(api, user_id="alice")

        history = api.get_history("alice")
        assert [item["conversion_id"] for item in history] == [body["conversionId"]]
        assert api.get_history() == []

        conversion = api.get_conversion("alice", body["conversionId"])
        assert conversion["original_filename"] == "statement.pdf"

        assert api.delete_conversion("alice", body["conversionId"])
        assert api.get_conversion("alice", body["conversionId"]) is None
        assert not api.delete_conversion("alice", body["conversionId"])

    def test_anonymous_user(self, api, extractor, statement_text):
        """Test conversions without a user id."""
        extractor.extract.return_value = ExtractedText(statement_text, 1)
        convert(api)

        assert len(api.get_history(ANONYMOUS_USER_ID)) == 1


class TestHealthCheck:
    """Test cases for the health endpoint."""

    def test_health_check(self, api):
        """Test that the health checker result is returned."""
        with patch.object(api.health_checker, "run_health_check", return_value={"status": "healthy"}):
            assert api.health_check() == {"status": "healthy"}
