"""Transaction line scanning and amount extraction."""

from typing import Iterator, List, Optional

from statement_converter.parser.locator import is_repeated_header
from statement_converter.parser.models import Candidate, DateMatch
from statement_converter.parser.patterns import AMOUNT_PATTERN, DATE_PATTERNS


DEFAULT_WINDOW_LOOKAHEAD = 2
DEFAULT_MIN_AMOUNT = 0.01
DEFAULT_MAX_AMOUNT = 100000.0


def find_date(line: str) -> Optional[DateMatch]:
    """Return the first date found on the line, trying patterns in order."""
    for name, pattern in DATE_PATTERNS:
        match = pattern.search(line)
        if match:
            return DateMatch(match.group(1), match.start(1), match.end(1), name)
    return None


def build_window(lines: List[str], index: int, lookahead: int = DEFAULT_WINDOW_LOOKAHEAD) -> str:
    """Join a line with up to ``lookahead`` following lines."""
    return " ".join(lines[index:index + 1 + lookahead])


def parse_amount(token: str) -> Optional[float]:
    """Parse an amount token such as ``$3,449.55`` or ``-89.99``."""
    try:
        return float(token.replace("$", "").replace(",", ""))
    except ValueError:
        return None


def extract_amounts(
    text: str,
    min_amount: float = DEFAULT_MIN_AMOUNT,
    max_amount: float = DEFAULT_MAX_AMOUNT
) -> List[float]:
    """Find every plausible currency amount in the text.

    Args:
        text: Window text to scan.
        min_amount: Exclusive lower bound on the absolute value.
        max_amount: Exclusive upper bound on the absolute value.

    Returns:
        Amounts in order of appearance, magnitude filter applied.
    """
    amounts = []
    for match in AMOUNT_PATTERN.finditer(text):
        amount = parse_amount(match.group(1))
        if amount is not None and min_amount < abs(amount) < max_amount:
            amounts.append(amount)
    return amounts


def scan_candidates(
    lines: List[str],
    start: int,
    lookahead: int = DEFAULT_WINDOW_LOOKAHEAD,
    min_amount: float = DEFAULT_MIN_AMOUNT,
    max_amount: float = DEFAULT_MAX_AMOUNT
) -> Iterator[Candidate]:
    """Yield a candidate for every dated line that has at least one amount.

    Args:
        lines: Normalised statement lines.
        start: Index of the first line of the transaction section.
        lookahead: Number of following lines joined into each window.
        min_amount: Exclusive lower bound on amount magnitude.
        max_amount: Exclusive upper bound on amount magnitude.

    Yields:
        Candidate tuples in line order.
    """
    for index in range(start, len(lines)):
        line = lines[index]
        if is_repeated_header(line):
            continue

        date_match = find_date(line)
        if date_match is None:
            continue

        window = build_window(lines, index, lookahead)
        amounts = extract_amounts(window, min_amount, max_amount)
        if not amounts:
            continue

        yield Candidate(index, date_match, window, tuple(amounts))
