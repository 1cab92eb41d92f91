"""Statement parser: extracted text in, transaction ledger out."""

from typing import Any, List, Optional

from statement_converter.config.settings import Settings
from statement_converter.parser.assembler import build_transaction
from statement_converter.parser.fallback import sample_ledger
from statement_converter.parser.locator import find_transaction_section, normalize_lines
from statement_converter.parser.models import ParseResult, Transaction
from statement_converter.parser.scanner import scan_candidates
from statement_converter.utils.logger import get_logger


class StatementParser:
    """Runs the locate, scan, classify, clean and assemble stages.

    The parser holds configuration only; every call to :meth:`parse` works on
    its own locals, so one instance can serve concurrent documents.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize statement parser.

        Args:
            settings: Parser tunables. Defaults to ``Settings()``.
        """
        self.settings = settings or Settings()
        self.logger = get_logger(__name__)

    def parse(self, text: Any) -> ParseResult:
        """Parse extracted statement text into a ledger.

        Never raises for unrecognisable input: non-string or blank text, a
        missing transaction section and a scan with no survivors all end in
        the fallback ledger.

        Args:
            text: Plain text extracted from a statement.

        Returns:
            ParseResult with at most ``max_transactions`` transactions.
        """
        if not isinstance(text, str) or not text.strip():
            self.logger.info("Invalid or empty text input for parsing")
            return self._fallback("no_text", text_length=len(text) if isinstance(text, str) else 0)

        lines = normalize_lines(text)
        self.logger.debug(f"Processing {len(lines)} lines from extracted text")

        start = find_transaction_section(lines)
        if start is None:
            self.logger.info("Could not find transaction section, using sample data")
            return self._fallback("no_section", line_count=len(lines), text_length=len(text))

        self.logger.debug(f"Found transaction section starting at line {start}")

        transactions: List[Transaction] = []
        rejected = 0
        for candidate in scan_candidates(
            lines,
            start,
            lookahead=self.settings.window_lookahead,
            min_amount=self.settings.min_amount,
            max_amount=self.settings.max_amount,
        ):
            transaction = build_transaction(
                candidate,
                max_description_length=self.settings.max_description_length,
                balance_strategy=self.settings.balance_strategy,
            )
            if transaction is None:
                rejected += 1
                self.logger.debug(f"Rejected boilerplate candidate at line {candidate.line_index}")
                continue

            transactions.append(transaction)
            if len(transactions) >= self.settings.max_transactions:
                self.logger.info(f"Ledger cap of {self.settings.max_transactions} reached")
                break

        if not transactions:
            self.logger.info("No transactions found, using sample data")
            return self._fallback(
                "no_transactions",
                section_start=start,
                line_count=len(lines),
                text_length=len(text),
                rejected_count=rejected,
            )

        self.logger.info(f"Found {len(transactions)} transactions from statement text")
        return ParseResult(
            transactions=tuple(transactions),
            used_sample_data=False,
            section_start=start,
            line_count=len(lines),
            text_length=len(text),
            rejected_count=rejected,
        )

    def parse_extracted(self, text: Any, page_count: Optional[int] = None) -> ParseResult:
        """Parse text returned by the extractor.

        Text shorter than ``min_text_length`` is treated as a document without
        a transaction section.
        """
        if isinstance(text, str) and len(text) < self.settings.min_text_length:
            self.logger.info(
                f"Extracted text too short ({len(text)} characters, "
                f"pages={page_count}), using sample data"
            )
            return self._fallback("no_text", text_length=len(text))
        return self.parse(text)

    def _fallback(self, reason: str, **diagnostics: Any) -> ParseResult:
        if not self.settings.use_sample_fallback:
            return ParseResult(transactions=(), used_sample_data=False, fallback_reason=reason, **diagnostics)
        return ParseResult(
            transactions=sample_ledger(),
            used_sample_data=True,
            fallback_reason=reason,
            **diagnostics,
        )


def parse_statement(text: Any, settings: Optional[Settings] = None) -> ParseResult:
    """Parse statement text with a throwaway parser."""
    return StatementParser(settings).parse(text)
