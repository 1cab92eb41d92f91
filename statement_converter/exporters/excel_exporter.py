"""Excel export of transaction ledgers."""

import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from statement_converter.config.settings import EXCEL_OUTPUT_FORMAT, REPORTS_DIR
from statement_converter.exporters.csv_exporter import CSV_HEADERS
from statement_converter.parser.models import LEDGER_FIELDS, Transaction
from statement_converter.utils.logger import get_logger
from statement_converter.utils.validators import ValidationError, validate_directory_path


AMOUNT_COLUMNS = ("amount", "balance")


class ExcelExportError(Exception):
    """Custom exception for Excel export errors."""
    pass


class ExcelExporter:
    """Writes a ledger to an .xlsx workbook."""

    def __init__(self, header_style: str = "title") -> None:
        """Initialize Excel exporter.

        Args:
            header_style: Column header style, as for the CSV exporter.
        """
        self.logger = get_logger(__name__)
        self.headers = CSV_HEADERS[header_style]

        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        self.header_alignment = Alignment(horizontal="center", vertical="center")
        self.amount_format = '#,##0.00'

    def generate_filename(self, base_name: str, timestamp: bool = True) -> str:
        """Generate an .xlsx filename, optionally timestamped."""
        parts = [base_name]
        if timestamp:
            parts.append(datetime.now().strftime("%Y%m%d_%H%M%S"))
        return f"{'_'.join(parts)}.{EXCEL_OUTPUT_FORMAT}"

    def transactions_to_dataframe(self, transactions: List[Transaction]) -> pd.DataFrame:
        """Convert a ledger to a DataFrame with numeric amount columns.

        Args:
            transactions: Ledger to convert.

        Returns:
            DataFrame with one column per ledger field, in ledger order.
        """
        df = pd.DataFrame(
            [transaction.to_dict() for transaction in transactions],
            columns=list(LEDGER_FIELDS),
        )
        for column in AMOUNT_COLUMNS:
            df[column] = pd.to_numeric(df[column], errors="coerce")
        return df

    def _style_header_row(self, worksheet) -> None:
        for cell in worksheet[1]:
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.header_alignment

    def _autosize_columns(self, worksheet) -> None:
        for col_idx in range(1, worksheet.max_column + 1):
            max_length = 0
            for row_idx in range(1, worksheet.max_row + 1):
                value = worksheet.cell(row=row_idx, column=col_idx).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))
            worksheet.column_dimensions[get_column_letter(col_idx)].width = min(max_length + 2, 50)

    def create_transactions_sheet(
        self,
        workbook: Workbook,
        transactions_df: pd.DataFrame,
        sheet_name: str = "Transactions"
    ) -> None:
        """Create the transactions sheet in a workbook.

        Args:
            workbook: Excel workbook object.
            transactions_df: DataFrame from :meth:`transactions_to_dataframe`.
            sheet_name: Name for the sheet.
        """
        worksheet = workbook.create_sheet(title=sheet_name)
        worksheet.append(list(self.headers))

        amount_indexes = [LEDGER_FIELDS.index(column) + 1 for column in AMOUNT_COLUMNS]
        for row in dataframe_to_rows(transactions_df, index=False, header=False):
            worksheet.append(row)
            for col_idx in amount_indexes:
                worksheet.cell(row=worksheet.max_row, column=col_idx).number_format = self.amount_format

        self._style_header_row(worksheet)
        self._autosize_columns(worksheet)
        self.logger.info(f"Created transactions sheet with {len(transactions_df)} rows")

    def create_metadata_sheet(
        self,
        workbook: Workbook,
        metadata: Dict[str, Any],
        sheet_name: str = "Metadata"
    ) -> None:
        """Create a key/value metadata sheet in a workbook."""
        worksheet = workbook.create_sheet(title=sheet_name)
        worksheet.append(["Key", "Value"])
        for key, value in metadata.items():
            worksheet.append([str(key), str(value)])

        self._style_header_row(worksheet)
        self._autosize_columns(worksheet)
        self.logger.info(f"Created metadata sheet with {len(metadata)} items")

    def export(
        self,
        transactions: List[Transaction],
        output_path: Optional[str] = None,
        filename: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        """Write a ledger to an Excel file.

        Args:
            transactions: Ledger to export.
            output_path: Output directory. Defaults to the reports directory.
            filename: Output filename. Generated when omitted.
            metadata: Optional metadata written to a second sheet.

        Returns:
            Path to the created Excel file.

        Raises:
            ExcelExportError: If the workbook cannot be written.
        """
        try:
            if output_path is None:
                output_path = REPORTS_DIR

            validate_directory_path(output_path)

            if filename is None:
                filename = self.generate_filename("bank_statement")

            if not filename.endswith(f".{EXCEL_OUTPUT_FORMAT}"):
                filename = f"{filename}.{EXCEL_OUTPUT_FORMAT}"

            full_path = os.path.join(output_path, filename)

            workbook = Workbook()
            workbook.remove(workbook.active)

            self.create_transactions_sheet(workbook, self.transactions_to_dataframe(transactions))
            if metadata:
                self.create_metadata_sheet(workbook, metadata)

            workbook.save(full_path)
            workbook.close()

            self.logger.info(f"Excel file created successfully: {full_path}")
            return full_path

        except ValidationError as e:
            raise ExcelExportError(f"Validation error: {str(e)}")
        except OSError as e:
            raise ExcelExportError(f"Failed to write Excel file: {str(e)}")
