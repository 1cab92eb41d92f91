"""Keyword classification of transaction windows."""

from typing import Sequence

from statement_converter.parser.patterns import DEFAULT_TRANSACTION_TYPE, TYPE_RULES, TypeRule


def classify_transaction(text: str, rules: Sequence[TypeRule] = TYPE_RULES) -> str:
    """Return the type of the first rule matching the text.

    Matching is a case-insensitive substring test; rules are evaluated in
    table order.

    Args:
        text: Window text of a candidate transaction.
        rules: Ordered classification table.

    Returns:
        Transaction type name, ``"Transaction"`` when no rule matches.
    """
    lowered = text.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.result
    return DEFAULT_TRANSACTION_TYPE
