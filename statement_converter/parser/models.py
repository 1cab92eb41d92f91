"""Data classes produced by the statement parser."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, NamedTuple, Optional, Tuple


LEDGER_FIELDS: Tuple[str, ...] = ("date", "type", "description", "amount", "balance")


@dataclass(frozen=True)
class Transaction:
    """A single ledger entry.

    All fields are display strings: ``amount`` and ``balance`` are already
    formatted with two decimals, ``date`` is ``Mon D, YYYY`` when the matched
    token could be parsed.
    """

    date: str
    type: str
    description: str
    amount: str
    balance: str

    def to_dict(self) -> Dict[str, str]:
        """Convert transaction to dictionary."""
        return asdict(self)

    def to_row(self) -> List[str]:
        """Return the field values in ledger column order."""
        return [getattr(self, name) for name in LEDGER_FIELDS]


class DateMatch(NamedTuple):
    """A date token found on a candidate line."""

    token: str
    start: int
    end: int
    pattern: str


class Candidate(NamedTuple):
    """A dated line together with its lookahead window and amounts."""

    line_index: int
    date: DateMatch
    window: str
    amounts: Tuple[float, ...]


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one document."""

    transactions: Tuple[Transaction, ...]
    used_sample_data: bool
    section_start: Optional[int] = None
    line_count: int = 0
    text_length: int = 0
    rejected_count: int = 0
    fallback_reason: Optional[str] = None

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a JSON-friendly dictionary."""
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "transaction_count": self.transaction_count,
            "used_sample_data": self.used_sample_data,
            "section_start": self.section_start,
            "line_count": self.line_count,
            "text_length": self.text_length,
            "rejected_count": self.rejected_count,
            "fallback_reason": self.fallback_reason,
        }
