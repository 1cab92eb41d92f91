"""Line normalisation and transaction-section location."""

from typing import List, Optional

from statement_converter.parser.patterns import (
    CURRENCY_SYMBOLS,
    HEADER_KEYWORDS,
    REPEATED_HEADER_KEYWORDS,
    SECTION_BLACKLIST,
    SECTION_DATE_PATTERN,
    TWO_DECIMAL_PATTERN,
)


def normalize_lines(text: str) -> List[str]:
    """Split raw text into trimmed, non-empty lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def is_table_header(line: str) -> bool:
    """True when the line names the date, description and amount columns."""
    lowered = line.lower()
    return all(keyword in lowered for keyword in HEADER_KEYWORDS)


def is_repeated_header(line: str) -> bool:
    lowered = line.lower()
    return all(keyword in lowered for keyword in REPEATED_HEADER_KEYWORDS)


def looks_like_first_transaction(line: str) -> bool:
    """Content heuristic for a table without a recognisable header.

    The line must open with a ``Mon D, YYYY`` date, carry a currency symbol
    and a two-decimal number, and must not read like account-summary text.
    """
    lowered = line.lower()
    if not SECTION_DATE_PATTERN.match(lowered):
        return False
    if not any(symbol in lowered for symbol in CURRENCY_SYMBOLS):
        return False
    if not TWO_DECIMAL_PATTERN.search(lowered):
        return False
    return not any(term in lowered for term in SECTION_BLACKLIST)


def find_transaction_section(lines: List[str]) -> Optional[int]:
    """Return the index of the first transaction line, or None.

    Lines are visited once, top to bottom. A header line starts the section
    on the following line; a line passing the content heuristic starts it on
    itself.

    Args:
        lines: Normalised statement lines.

    Returns:
        Start index into ``lines``, or None when no section was found.
    """
    for index, line in enumerate(lines):
        if is_table_header(line):
            return index + 1
        if looks_like_first_transaction(line):
            return index
    return None
