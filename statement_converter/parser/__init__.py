"""Heuristic parsing of statement text into a transaction ledger."""

from statement_converter.parser.engine import StatementParser, parse_statement
from statement_converter.parser.models import ParseResult, Transaction

__all__ = [
    "StatementParser",
    "parse_statement",
    "ParseResult",
    "Transaction",
]
