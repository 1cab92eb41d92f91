"""Description cleanup and boilerplate rejection."""

import re

from statement_converter.parser.patterns import (
    AMOUNT_PATTERN,
    DESCRIPTION_BLACKLIST,
    EDGE_NON_WORD_PATTERN,
    TRANSACTION_ID_PATTERNS,
    WHITESPACE_PATTERN,
)


DEFAULT_MAX_DESCRIPTION_LENGTH = 100
MIN_DESCRIPTION_LENGTH = 3


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def clean_description(
    window: str,
    date_token: str,
    transaction_type: str,
    max_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH
) -> str:
    """Reduce a window to a human-readable description.

    The date token, every amount, the type phrase and transaction-id
    fragments are removed; what is left is trimmed of punctuation and
    capitalised. Too little text left yields ``"<Type> Transaction"``.

    Args:
        window: Candidate window text.
        date_token: Exact date substring matched on the candidate line.
        transaction_type: Type assigned by the classifier.
        max_length: Maximum description length.

    Returns:
        The cleaned description, never empty.
    """
    description = window.replace(date_token, "", 1)
    description = AMOUNT_PATTERN.sub("", description)
    description = collapse_whitespace(description)

    type_pattern = re.compile(re.escape(transaction_type.lower()), re.IGNORECASE)
    description = type_pattern.sub("", description).strip()

    for pattern in TRANSACTION_ID_PATTERNS:
        description = pattern.sub("", description).strip()

    description = EDGE_NON_WORD_PATTERN.sub("", description)
    description = collapse_whitespace(description)

    if len(description) < MIN_DESCRIPTION_LENGTH:
        return f"{transaction_type} Transaction"

    # Rest of the text is lower-cased: "PAYROLL ACH" reads "Payroll ach".
    return description.capitalize()[:max_length]


def is_boilerplate(description: str) -> bool:
    """True when the description reads like account-summary text."""
    lowered = description.lower()
    return any(term in lowered for term in DESCRIPTION_BLACKLIST)
