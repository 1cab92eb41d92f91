"""Celery application and task definitions for statement conversion."""

import os
from datetime import datetime
from typing import Any, Dict, Optional

from celery import Celery

from statement_converter.api.conversion_api import converted_filename
from statement_converter.config.settings import (
    CELERY_ACCEPT_CONTENT,
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_RESULT_SERIALIZER,
    CELERY_TASK_SERIALIZER,
    CELERY_TIMEZONE,
    Settings,
)
from statement_converter.exporters.csv_exporter import CSVExporter
from statement_converter.exporters.excel_exporter import ExcelExporter
from statement_converter.parser.engine import StatementParser
from statement_converter.pdf_processor.extractor import PDFExtractionError, TextExtractor
from statement_converter.utils.logger import ConversionLogger, get_logger
from statement_converter.utils.validators import ValidationError, validate_directory_path


def create_celery_app() -> Celery:
    """Create the Celery application for conversion workers."""
    app = Celery(
        "statement_converter",
        broker=CELERY_BROKER_URL,
        backend=CELERY_RESULT_BACKEND,
    )
    app.conf.update(
        task_serializer=CELERY_TASK_SERIALIZER,
        result_serializer=CELERY_RESULT_SERIALIZER,
        accept_content=CELERY_ACCEPT_CONTENT,
        timezone=CELERY_TIMEZONE,
        task_routes={
            "convert_statement_file": {"queue": "statement_conversion"},
        },
        worker_prefetch_multiplier=1,
        task_acks_late=True,
    )
    return app


celery_app = create_celery_app()

logger = get_logger(__name__)


def run_conversion(
    pdf_path: str,
    output_dir: str,
    header_style: str,
    export_excel: bool,
    task_id: str,
    settings: Optional[Settings] = None
) -> Dict[str, Any]:
    """Convert one statement PDF on disk to CSV and optionally Excel.

    Raises:
        ValidationError: If the input file or output directory is invalid.
        PDFExtractionError: If the PDF cannot be read.
    """
    settings = settings or Settings()
    conversion_log = ConversionLogger(task_id, logger)

    validate_directory_path(output_dir)
    conversion_log.log_start(pdf_path, os.path.getsize(pdf_path) if os.path.exists(pdf_path) else 0)

    extracted = TextExtractor().extract_file(pdf_path, max_size_mb=settings.max_file_size_mb)
    conversion_log.log_progress(f"Extracted {len(extracted.text)} characters from {extracted.page_count} pages")

    result = StatementParser(settings).parse_extracted(extracted.text, extracted.page_count)

    csv_path = os.path.join(output_dir, converted_filename(pdf_path))
    CSVExporter(header_style).write(result.transactions, csv_path)

    outcome = {
        "success": True,
        "csv_path": csv_path,
        "transaction_count": result.transaction_count,
        "used_sample_data": result.used_sample_data,
        "task_id": task_id,
    }

    if export_excel:
        stem = os.path.splitext(os.path.basename(csv_path))[0]
        outcome["excel_path"] = ExcelExporter().export(
            list(result.transactions),
            output_path=output_dir,
            filename=stem,
            metadata={
                "source_file": os.path.basename(pdf_path),
                "processing_date": datetime.now().isoformat(),
                "task_id": task_id,
                "total_transactions": result.transaction_count,
                "used_sample_data": result.used_sample_data,
            } if settings.include_metadata else None,
        )

    conversion_log.log_completion(csv_path, result.transaction_count)
    return outcome


@celery_app.task(bind=True, name="convert_statement_file")
def convert_statement_file(
    self,
    pdf_path: str,
    output_dir: Optional[str] = None,
    header_style: Optional[str] = None,
    export_excel: bool = False
) -> Dict[str, Any]:
    """Convert a statement PDF to CSV in the background.

    Args:
        self: Celery task instance.
        pdf_path: Path to PDF file.
        output_dir: Directory for the output files.
        header_style: CSV header style.
        export_excel: Whether to also write an Excel workbook.

    Returns:
        Dictionary with conversion results. Validation and extraction
        failures are returned with their ``code`` and are not retried.
    """
    task_id = self.request.id
    settings = Settings.from_env()

    try:
        return run_conversion(
            pdf_path,
            output_dir or settings.output_dir,
            header_style or settings.header_style,
            export_excel,
            task_id,
            settings,
        )

    except (ValidationError, PDFExtractionError) as e:
        logger.warning(f"Task {task_id}: conversion of {pdf_path} failed with {e.code}")
        return {
            "success": False,
            "code": e.code,
            "error": str(e),
            "task_id": task_id,
        }

    except Exception as e:
        ConversionLogger(task_id, logger).log_error(e, "Unexpected error during conversion")

        if self.request.retries < settings.max_retries:
            raise self.retry(countdown=settings.retry_delay_seconds, exc=e)

        return {
            "success": False,
            "code": "PROCESSING_ERROR",
            "error": f"Unexpected error: {str(e)}",
            "task_id": task_id,
            "retries": self.request.retries,
        }


def get_task_status(task_id: str) -> Dict[str, Any]:
    """Get the state of a conversion task.

    Args:
        task_id: Celery task ID.

    Returns:
        Dictionary with task status information.
    """
    result = celery_app.AsyncResult(task_id)

    status = {
        "task_id": task_id,
        "state": result.state,
        "ready": result.ready(),
    }

    if result.ready():
        if result.successful():
            status["result"] = result.result
        else:
            status["error"] = str(result.result)

    return status
