"""Tests for Celery tasks."""

from unittest.mock import Mock, patch

import pytest
from openpyxl import load_workbook

from statement_converter.exporters.csv_exporter import read_csv
from statement_converter.pdf_processor.extractor import ExtractedText, PDFPasswordProtectedError
from statement_converter.tasks.celery_app import (
    celery_app,
    convert_statement_file,
    create_celery_app,
    get_task_status,
    run_conversion,
)


TASKS = "statement_converter.tasks.celery_app"


@pytest.fixture
def pdf_file(temp_dir):
    """Create a placeholder PDF file."""
    path = temp_dir / "august.pdf"
    path.write_bytes(b"%PDF-1.4 placeholder")
    return path


@pytest.fixture
def mock_extractor(statement_text):
    """Patch the extractor used by the tasks."""
    with patch(f"{TASKS}.TextExtractor") as mock_class:
        mock_class.return_value.extract_file.return_value = ExtractedText(statement_text, 1)
        yield mock_class.return_value


class TestCeleryApp:
    """Test cases for the Celery application."""

    def test_create_celery_app(self):
        """Test application configuration."""
        app = create_celery_app()

        assert app.main == "statement_converter"
        assert app.conf.task_serializer == "json"
        assert app.conf.task_acks_late is True

    def test_task_registered(self):
        """Test that the conversion task is registered."""
        assert "convert_statement_file" in celery_app.tasks


class TestRunConversion:
    """Test cases for run_conversion."""

    def test_writes_csv(self, pdf_file, temp_dir, mock_extractor, sample_settings):
        """Test CSV output for a parsed statement."""
        out_dir = temp_dir / "out"
        outcome = run_conversion(str(pdf_file), str(out_dir), "upper", False, "task-1", sample_settings)

        assert outcome["success"] is True
        assert outcome["csv_path"] == str(out_dir / "august_converted.csv")
        assert outcome["transaction_count"] == 4
        assert outcome["used_sample_data"] is False
        assert "excel_path" not in outcome

        rows = read_csv((out_dir / "august_converted.csv").read_text(encoding="utf-8"))
        assert len(rows) == 5

    def test_writes_excel(self, pdf_file, temp_dir, mock_extractor, sample_settings):
        """Test optional Excel output."""
        outcome = run_conversion(str(pdf_file), str(temp_dir), "title", True, "task-2", sample_settings)

        assert outcome["excel_path"].endswith("august_converted.xlsx")
        workbook = load_workbook(outcome["excel_path"])
        assert workbook["Metadata"].cell(row=2, column=2).value == "august.pdf"


class TestConvertStatementFile:
    """Test cases for the convert_statement_file task."""

    def test_success(self, pdf_file, temp_dir, mock_extractor):
        """Test a successful task run."""
        result = convert_statement_file.apply(args=[str(pdf_file), str(temp_dir)]).get()

        assert result["success"] is True
        assert result["transaction_count"] == 4

    def test_missing_file(self, temp_dir):
        """Test validation errors are returned with their code."""
        result = convert_statement_file.apply(args=[str(temp_dir / "missing.pdf"), str(temp_dir)]).get()

        assert result["success"] is False
        assert result["code"] == "NO_FILE"

    def test_extraction_error_is_not_retried(self, pdf_file, temp_dir, mock_extractor):
        """Test coded extraction errors."""
        mock_extractor.extract_file.side_effect = PDFPasswordProtectedError("locked")

        result = convert_statement_file.apply(args=[str(pdf_file), str(temp_dir)]).get()

        assert result["success"] is False
        assert result["code"] == "PDF_PASSWORD_PROTECTED"

    def test_unexpected_error(self, pdf_file, temp_dir, mock_extractor, monkeypatch):
        """Test unexpected errors once retries are exhausted."""
        monkeypatch.setenv("MAX_RETRIES", "0")
        mock_extractor.extract_file.side_effect = RuntimeError("disk gone")

        result = convert_statement_file.apply(args=[str(pdf_file), str(temp_dir)]).get()

        assert result["success"] is False
        assert result["code"] == "PROCESSING_ERROR"
        assert "disk gone" in result["error"]


class TestGetTaskStatus:
    """Test cases for get_task_status."""

    @patch.object(celery_app, "AsyncResult")
    def test_successful_task(self, mock_async_result):
        """Test status of a finished task."""
        mock_async_result.return_value = Mock(
            state="SUCCESS",
            result={"success": True},
            **{"ready.return_value": True, "successful.return_value": True},
        )

        status = get_task_status("task-1")
        assert status == {"task_id": "task-1", "state": "SUCCESS", "ready": True, "result": {"success": True}}

    @patch.object(celery_app, "AsyncResult")
    def test_pending_task(self, mock_async_result):
        """Test status of a queued task."""
        mock_async_result.return_value = Mock(state="PENDING", **{"ready.return_value": False})

        status = get_task_status("task-2")
        assert status == {"task_id": "task-2", "state": "PENDING", "ready": False}
