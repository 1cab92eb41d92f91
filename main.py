#!/usr/bin/env python3
"""Bank statement to CSV converter.

Reads bank statement PDFs (or text already extracted from them), recovers the
transaction ledger and writes it out as CSV, optionally with an Excel copy.

Usage:
    python main.py --pdf-file <path_to_pdf> [--output-dir <dir>] [--excel]

    python main.py --text-file <path_to_txt> [--header-style title]

    python main.py --batch-dir <directory_with_pdfs> [--output-dir <dir>]

    python main.py --daemon  # Run as background worker
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from statement_converter.config.settings import CSV_HEADER_STYLES, REPORTS_DIR, Settings, ensure_directories, load_settings
from statement_converter.exporters.csv_exporter import CSVExporter
from statement_converter.parser.engine import StatementParser
from statement_converter.pdf_processor.extractor import PDFExtractionError
from statement_converter.tasks.celery_app import run_conversion
from statement_converter.utils.logger import get_logger, setup_logger
from statement_converter.utils.validators import ValidationError, validate_directory_path, validate_file_path


class StatementProcessor:
    """Command line front end for statement conversion."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize the processor."""
        self.settings = settings or Settings.from_env()
        self.logger = get_logger("statement_converter.cli")

    def process_pdf(
        self,
        pdf_path: str,
        output_dir: Optional[str] = None,
        header_style: Optional[str] = None,
        export_excel: bool = False
    ) -> Optional[str]:
        """Convert a single PDF statement.

        Args:
            pdf_path: Path to the PDF file.
            output_dir: Output directory for the CSV.
            header_style: CSV header style.
            export_excel: Whether to also write an Excel workbook.

        Returns:
            Path to the CSV file or None if conversion failed.
        """
        try:
            self.logger.info(f"Processing PDF: {pdf_path}")
            outcome = run_conversion(
                pdf_path,
                output_dir or self.settings.output_dir,
                header_style or self.settings.header_style,
                export_excel,
                "cli",
                self.settings,
            )
            if outcome["used_sample_data"]:
                self.logger.warning(f"No transactions recognised in {pdf_path}, wrote sample data")
            return outcome["csv_path"]

        except (ValidationError, PDFExtractionError) as e:
            self.logger.error(f"Conversion failed for {pdf_path} [{e.code}]: {str(e)}")
            return None

    def process_text_file(
        self,
        text_path: str,
        output_dir: Optional[str] = None,
        header_style: Optional[str] = None
    ) -> Optional[str]:
        """Convert a file of already extracted statement text."""
        try:
            validate_file_path(text_path)
            output_dir = output_dir or self.settings.output_dir
            validate_directory_path(output_dir)
        except ValidationError as e:
            self.logger.error(f"Conversion failed for {text_path}: {str(e)}")
            return None

        with open(text_path, 'r', encoding='utf-8') as f:
            text = f.read()

        result = StatementParser(self.settings).parse(text)
        stem = Path(text_path).stem
        csv_path = os.path.join(output_dir, f"{stem}_converted.csv")
        CSVExporter(header_style or self.settings.header_style).write(result.transactions, csv_path)

        self.logger.info(f"Wrote {result.transaction_count} transactions to {csv_path}")
        return csv_path

    def process_batch(
        self,
        batch_dir: str,
        output_dir: Optional[str] = None,
        header_style: Optional[str] = None,
        export_excel: bool = False
    ) -> List[str]:
        """Convert every PDF in a directory.

        Returns:
            List of paths to the CSV files written.
        """
        self.logger.info(f"Processing batch directory: {batch_dir}")

        pdf_files = sorted(Path(batch_dir).glob("*.pdf"))
        if not pdf_files:
            self.logger.warning(f"No PDF files found in {batch_dir}")
            return []

        self.logger.info(f"Found {len(pdf_files)} PDF files")

        written = []
        for pdf_file in pdf_files:
            csv_path = self.process_pdf(str(pdf_file), output_dir, header_style, export_excel)
            if csv_path:
                written.append(csv_path)

        self.logger.info(f"Successfully processed {len(written)}/{len(pdf_files)} files")
        return written

    def start_daemon(self) -> None:
        """Start a Celery worker for background conversions."""
        self.logger.info("Starting statement converter worker")
        ensure_directories()

        from statement_converter.tasks.celery_app import celery_app

        celery_app.worker_main(['worker', '--loglevel=info'])


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Convert bank statements to CSV transaction ledgers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Convert a single PDF
    python main.py --pdf-file statement.pdf

    # Convert extracted text with title-case headers
    python main.py --text-file statement.txt --header-style title

    # Convert every PDF in a directory, with Excel copies
    python main.py --batch-dir ./statements --excel

    # Run as background worker
    python main.py --daemon
        """
    )

    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        '--pdf-file',
        type=str,
        help='Path to single PDF file to convert'
    )
    group.add_argument(
        '--text-file',
        type=str,
        help='Path to a text file holding extracted statement text'
    )
    group.add_argument(
        '--batch-dir',
        type=str,
        help='Directory containing multiple PDF files to convert'
    )
    group.add_argument(
        '--daemon',
        action='store_true',
        help='Run as background worker'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        default=None,
        help=f'Output directory for CSV files (default: {REPORTS_DIR})'
    )
    parser.add_argument(
        '--header-style',
        choices=CSV_HEADER_STYLES,
        default=None,
        help='CSV header style (default: upper)'
    )
    parser.add_argument(
        '--excel',
        action='store_true',
        help='Also write an Excel workbook (PDF input only)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='JSON file with settings overriding the environment'
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    try:
        args = parse_arguments(argv)
        settings = load_settings(args.config) if args.config else Settings.from_env()
        if not settings.validate():
            print("Error: Invalid configuration. Check environment variables and --config file.")
            return 1

        setup_logger(
            "statement_converter",
            level=settings.get_log_level(),
            logs_dir=settings.logs_dir,
            log_format=settings.log_format
        )
        processor = StatementProcessor(settings)

        if args.daemon:
            processor.start_daemon()
        elif args.pdf_file:
            output_path = processor.process_pdf(
                pdf_path=args.pdf_file,
                output_dir=args.output_dir,
                header_style=args.header_style,
                export_excel=args.excel
            )
            if output_path:
                print(f"Success! CSV created: {output_path}")
                return 0
            print("Error: Conversion failed. Check logs for details.")
            return 1

        elif args.text_file:
            output_path = processor.process_text_file(
                text_path=args.text_file,
                output_dir=args.output_dir,
                header_style=args.header_style
            )
            if output_path:
                print(f"Success! CSV created: {output_path}")
                return 0
            print("Error: Conversion failed. Check logs for details.")
            return 1

        elif args.batch_dir:
            output_paths = processor.process_batch(
                batch_dir=args.batch_dir,
                output_dir=args.output_dir,
                header_style=args.header_style,
                export_excel=args.excel
            )
            if output_paths:
                print(f"Success! Created {len(output_paths)} CSV files:")
                for path in output_paths:
                    print(f"  - {path}")
                return 0
            print("Error: No files were converted successfully. Check logs for details.")
            return 1

        return 0

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130
    except Exception as e:
        print(f"Unexpected error: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
