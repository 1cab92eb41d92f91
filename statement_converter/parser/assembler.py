"""Turning scanner candidates into ledger transactions."""

from datetime import datetime
from typing import Optional, Sequence

from statement_converter.parser.classifier import classify_transaction
from statement_converter.parser.cleaner import (
    DEFAULT_MAX_DESCRIPTION_LENGTH,
    clean_description,
    collapse_whitespace,
    is_boilerplate,
)
from statement_converter.parser.models import Candidate, Transaction
from statement_converter.parser.patterns import DATE_FORMATS, MONTH_WORD_PATTERN


def format_date(token: str) -> str:
    """Format a date token as ``Mon D, YYYY``.

    Tokens that match none of the known formats are returned unchanged.
    """
    normalized = collapse_whitespace(token).replace(".", "")
    normalized = MONTH_WORD_PATTERN.sub(r"\1", normalized)
    for date_format in DATE_FORMATS:
        try:
            parsed = datetime.strptime(normalized, date_format)
        except ValueError:
            continue
        return f"{parsed:%b} {parsed.day}, {parsed.year}"
    return token


def format_amount(value: float) -> str:
    return f"{value:.2f}"


def select_balance(amounts: Sequence[float], strategy: str = "last") -> float:
    """Pick the balance from the amounts found in a window.

    ``"last"`` takes the final amount, ``"second"`` the one right after the
    transaction amount. A single amount is its own balance either way.
    """
    if len(amounts) == 1:
        return amounts[0]
    if strategy == "second":
        return amounts[1]
    return amounts[-1]


def build_transaction(
    candidate: Candidate,
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH,
    balance_strategy: str = "last"
) -> Optional[Transaction]:
    """Build a transaction from a candidate, or None if it is boilerplate.

    Args:
        candidate: Dated window with at least one qualifying amount.
        max_description_length: Maximum description length.
        balance_strategy: How to choose the balance among several amounts.

    Returns:
        A Transaction, or None when the cleaned description is rejected.
    """
    transaction_type = classify_transaction(candidate.window)
    description = clean_description(
        candidate.window,
        candidate.date.token,
        transaction_type,
        max_description_length,
    )
    if is_boilerplate(description):
        return None

    return Transaction(
        date=format_date(candidate.date.token),
        type=transaction_type,
        description=description,
        amount=format_amount(candidate.amounts[0]),
        balance=format_amount(select_balance(candidate.amounts, balance_strategy)),
    )
