"""CSV serialization of transaction ledgers."""

import csv
import io
from typing import Dict, Iterable, List, Tuple

from statement_converter.config.settings import CSV_HEADER_STYLE, CSV_HEADER_STYLES
from statement_converter.parser.models import Transaction


CSV_HEADERS: Dict[str, Tuple[str, ...]] = {
    "upper": ("DATE", "TYPE", "DESCRIPTION", "AMOUNT", "BALANCE"),
    "title": ("Date", "Type", "Description", "Amount", "Balance"),
}


class CSVExporter:
    """Writes a ledger as a fully quoted, comma-delimited table."""

    def __init__(self, header_style: str = CSV_HEADER_STYLE) -> None:
        """Initialize CSV exporter.

        Args:
            header_style: ``"upper"`` for ``DATE,TYPE,...`` or ``"title"``
                for ``Date,Type,...``.

        Raises:
            ValueError: If the header style is unknown.
        """
        if header_style not in CSV_HEADER_STYLES:
            raise ValueError(
                f"Unknown header style '{header_style}'. "
                f"Supported styles: {', '.join(CSV_HEADER_STYLES)}"
            )
        self.header_style = header_style

    @property
    def headers(self) -> Tuple[str, ...]:
        return CSV_HEADERS[self.header_style]

    def to_rows(self, transactions: Iterable[Transaction]) -> List[List[str]]:
        """Return the header row followed by one row per transaction."""
        rows = [list(self.headers)]
        rows.extend(transaction.to_row() for transaction in transactions)
        return rows

    def to_csv(self, transactions: Iterable[Transaction]) -> str:
        """Serialize transactions to CSV text.

        Every field is double-quoted with embedded quotes doubled. Rows are
        joined with ``\\n`` and the text has no trailing newline.

        Args:
            transactions: Ledger to serialize.

        Returns:
            CSV text including the header row.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerows(self.to_rows(transactions))
        return buffer.getvalue()[:-1]

    def write(self, transactions: Iterable[Transaction], output_path: str) -> str:
        """Write CSV text to a file and return its path."""
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            f.write(self.to_csv(transactions))
        return output_path


def read_csv(csv_text: str) -> List[List[str]]:
    """Split CSV text produced by :class:`CSVExporter` back into rows."""
    return list(csv.reader(io.StringIO(csv_text)))
