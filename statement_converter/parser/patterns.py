"""Pattern catalogs shared by the statement parsing stages.

Everything here is read-only module data: compiled once at import time and
never mutated by the parser.
"""

import re
from typing import NamedTuple, Tuple


_MONTHS = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)"

# Tried in order against a single line; the first pattern that matches wins.
DATE_PATTERNS: Tuple[Tuple[str, "re.Pattern[str]"], ...] = (
    ("slash", re.compile(r"\b(\d{1,2}/\d{1,2}/\d{2,4})\b")),
    ("dash", re.compile(r"\b(\d{1,2}-\d{1,2}-\d{2,4})\b")),
    ("month_day_year", re.compile(
        rf"\b({_MONTHS}[a-z]*\.?\s+\d{{1,2}},?\s+\d{{4}})\b", re.IGNORECASE
    )),
    ("day_month_year", re.compile(
        rf"\b(\d{{1,2}}\s+{_MONTHS}[a-z]*\.?\s+\d{{4}})\b", re.IGNORECASE
    )),
)

# strptime formats used to normalise a matched date token to "Mon D, YYYY".
DATE_FORMATS: Tuple[str, ...] = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%m-%d-%y",
    "%b %d, %Y",
    "%b %d %Y",
    "%B %d, %Y",
    "%B %d %Y",
    "%d %b %Y",
    "%d %B %Y",
)

# "$1,234.56", "-89.99", "3449.55"; never part of a longer number.
AMOUNT_PATTERN = re.compile(r"(?<![\d.])\$?([+-]?\d+(?:,\d{3})*\.\d{2})(?!\d)")

# Section locator, content heuristic: a line that opens with "Mon D, YYYY".
SECTION_DATE_PATTERN = re.compile(rf"^{_MONTHS}[a-z]*\.?\s+\d{{1,2}},?\s+\d{{4}}", re.IGNORECASE)
TWO_DECIMAL_PATTERN = re.compile(r"\d+\.\d{2}")

# "Sept", "August": month words cut to the three letters %b understands.
MONTH_WORD_PATTERN = re.compile(r"\b([A-Za-z]{3})[A-Za-z]+\b")
CURRENCY_SYMBOLS: Tuple[str, ...] = ("$",)

HEADER_KEYWORDS: Tuple[str, ...] = ("date", "description", "amount")
REPEATED_HEADER_KEYWORDS: Tuple[str, ...] = ("date", "description")

SECTION_BLACKLIST: Tuple[str, ...] = (
    "account",
    "balance",
    "interest rate",
    "member since",
    "statement period",
    "participating banks",
    "breakdown",
)

DESCRIPTION_BLACKLIST: Tuple[str, ...] = SECTION_BLACKLIST + (
    "moved balances",
    "current balance",
    "beginning balance",
    "annual percentage",
    "year-to-date",
    "current interest",
    "monthly interest",
    "primary account",
    "checking account",
)

TRANSACTION_ID_PATTERNS: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"transaction id:\s*[\w-]+", re.IGNORECASE),
    re.compile(r"id:\s*[\w-]+", re.IGNORECASE),
)

WHITESPACE_PATTERN = re.compile(r"\s+")
EDGE_NON_WORD_PATTERN = re.compile(r"^\W+|\W+$")


class TypeRule(NamedTuple):
    """One row of the classification cascade.

    A rule matches when every ``all_of`` term is present and, if ``any_of``
    is non-empty, at least one of its terms is present too.
    """

    result: str
    all_of: Tuple[str, ...] = ()
    any_of: Tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        if not all(term in text for term in self.all_of):
            return False
        return not self.any_of or any(term in text for term in self.any_of)


DEFAULT_TRANSACTION_TYPE = "Transaction"

# Multi-word phrases must stay above their single-word components.
TYPE_RULES: Tuple[TypeRule, ...] = (
    TypeRule("Direct Payment", any_of=("direct payment",)),
    TypeRule("Direct Deposit", any_of=("direct deposit",)),
    TypeRule("Interest Earned", any_of=("interest earned",)),
    TypeRule("Transfer to Savings", all_of=("withdrawal", "savings")),
    TypeRule("Transfer from Savings", all_of=("deposit", "savings")),
    TypeRule("Deposit", any_of=("deposit", "credit")),
    TypeRule("Withdrawal", any_of=("withdrawal", "debit")),
    TypeRule("Transfer", any_of=("transfer",)),
    TypeRule("Payment", any_of=("payment", "pay")),
    TypeRule("Fee", any_of=("fee", "charge")),
    TypeRule("Interest", any_of=("interest",)),
    TypeRule("Check", any_of=("check",)),
    TypeRule("ATM", any_of=("atm",)),
)

TRANSACTION_TYPES: Tuple[str, ...] = tuple(rule.result for rule in TYPE_RULES) + (
    DEFAULT_TRANSACTION_TYPE,
)
