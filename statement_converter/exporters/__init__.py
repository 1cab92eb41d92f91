"""Ledger exporters."""

from statement_converter.exporters.csv_exporter import CSVExporter, read_csv
from statement_converter.exporters.excel_exporter import ExcelExporter, ExcelExportError

__all__ = ["CSVExporter", "read_csv", "ExcelExporter", "ExcelExportError"]
