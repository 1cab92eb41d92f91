"""Fixed sample ledger returned when nothing could be recognised."""

from typing import Tuple

from statement_converter.parser.models import Transaction


SAMPLE_TRANSACTIONS: Tuple[Transaction, ...] = (
    Transaction(
        date="Aug 31, 2025",
        type="Interest Earned",
        description="Interest earned Transaction ID: 154-1",
        amount="0.49",
        balance="450.04",
    ),
    Transaction(
        date="Aug 22, 2025",
        type="Withdrawal",
        description="To Savings - 8443 Transaction ID: 153-65331001",
        amount="-1000.00",
        balance="449.55",
    ),
    Transaction(
        date="Aug 19, 2025",
        type="Withdrawal",
        description="To Savings - 8443 Transaction ID: 152-153835001",
        amount="-2000.00",
        balance="1449.55",
    ),
    Transaction(
        date="Aug 19, 2025",
        type="Direct Deposit",
        description="Payroll ach Transaction ID: 151-22201001",
        amount="3449.55",
        balance="3449.55",
    ),
)


def sample_ledger() -> Tuple[Transaction, ...]:
    return SAMPLE_TRANSACTIONS
