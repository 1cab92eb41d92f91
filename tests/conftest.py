"""Pytest configuration and fixtures for the statement converter."""

import shutil
import tempfile
from pathlib import Path

import pytest

from statement_converter.config.settings import Settings
from statement_converter.parser.models import Transaction
from statement_converter.storage.history_store import InMemoryHistoryStore


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def sample_settings(temp_dir):
    """Create sample settings for testing."""
    return Settings(
        output_dir=str(temp_dir / "reports"),
        logs_dir=str(temp_dir / "logs"),
        log_level="DEBUG",
        history_backend="memory",
        max_retries=0,
    )


@pytest.fixture
def single_line_settings(sample_settings):
    """Settings whose windows hold only the candidate line."""
    settings = sample_settings.clone()
    settings.window_lookahead = 0
    return settings


@pytest.fixture
def statement_text():
    """Statement text with a recognisable table header."""
    return "\n".join([
        "First Community Bank",
        "Account Number: ****8443",
        "Statement Period: Aug 1, 2025 - Aug 31, 2025",
        "",
        "Date Description Amount Balance",
        "Aug 19, 2025 Direct Deposit PAYROLL ACH Transaction ID: 151-22201001 $3,449.55 $3,449.55",
        "Aug 19, 2025 Withdrawal To Savings - 8443 Transaction ID: 152-153835001 -2,000.00 $1,449.55",
        "Aug 22, 2025 Withdrawal To Savings - 8443 Transaction ID: 153-65331001 -1,000.00 $449.55",
        "Aug 31, 2025 Interest Earned Transaction ID: 154-1 $0.49 $450.04",
        "Page 1 of 1",
        "End of statement",
    ])


@pytest.fixture
def headerless_statement_text():
    """Statement text whose table has no header row."""
    return "\n".join([
        "Your monthly activity",
        "Sep 2, 2025 ATM Main Street $60.00 $940.00",
        "Sep 5, 2025 Check 1042 $125.50 $814.50",
        "Sep 9, 2025 Monthly service fee $5.00 $809.50",
    ])


@pytest.fixture
def summary_only_text():
    """Text with no transaction table at all."""
    return "\n".join([
        "Current balance as of 08/19/2025 is $449.55",
        "Annual percentage yield earned 0.10%",
        "Thank you for banking with us",
    ])


@pytest.fixture
def sample_transactions():
    """Create sample transactions for testing."""
    return [
        Transaction(
            date="Aug 19, 2025",
            type="Direct Deposit",
            description="Payroll ach",
            amount="3449.55",
            balance="3449.55",
        ),
        Transaction(
            date="Aug 22, 2025",
            type="Payment",
            description='Paid "Acme, Inc." invoice',
            amount="-89.99",
            balance="3359.56",
        ),
    ]


@pytest.fixture
def history_store():
    """Create an empty in-memory history store."""
    return InMemoryHistoryStore()


@pytest.fixture
def sample_environment(monkeypatch):
    """Set environment variables for testing."""
    env_vars = {
        "MAX_TRANSACTIONS": "25",
        "BALANCE_STRATEGY": "second",
        "USE_SAMPLE_FALLBACK": "false",
        "CSV_HEADER_STYLE": "title",
        "HISTORY_BACKEND": "redis",
        "REDIS_URL": "redis://cache:6379/2",
        "LOG_LEVEL": "DEBUG",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars
