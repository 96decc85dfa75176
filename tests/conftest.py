"""Shared pytest fixtures for doppik tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from doppik.database.factories import create_sqlite_database
from doppik.domain.account import AccountService
from doppik.domain.chart import SKR03_ACCOUNTS
from doppik.domain.closing import ClosingService
from doppik.domain.contact import ContactService
from doppik.domain.entities import JournalLine
from doppik.domain.ledger import LedgerService
from doppik.domain.reversal import ReversalService
from doppik.domain.statements import StatementService
from doppik.domain.transaction import TransactionService
from doppik.logging_setup import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch):
    """Keep logging configuration and related env vars from leaking between tests."""
    monkeypatch.delenv("DOPPIK_LOG_LEVEL", raising=False)
    monkeypatch.delenv("DOPPIK_CLEARING_ACCOUNT", raising=False)
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def contact_service(temp_db):
    """Create a ContactService with a temporary database."""
    return ContactService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def statement_service(temp_db):
    """Create a StatementService with a temporary database."""
    return StatementService(temp_db)


@pytest.fixture
def closing_service(temp_db):
    """Create a ClosingService with a temporary database."""
    return ClosingService(temp_db)


@pytest.fixture
def reversal_service(temp_db):
    """Create a ReversalService with a temporary database."""
    return ReversalService(temp_db)


@pytest.fixture
def chart(account_service):
    """Seed the SKR03 chart and return accounts keyed by code."""
    account_service.seed_chart(SKR03_ACCOUNTS)
    return {acc.code: acc for acc in account_service.list_accounts()}


@pytest.fixture
def book(transaction_service, chart):
    """Return a helper that books a transaction from (code, debit, credit) tuples."""

    def _book(booking_date: date, description: str, *lines, **kwargs) -> int:
        journal_lines = [
            JournalLine(
                account_id=chart[code].id,
                debit=Decimal(debit),
                credit=Decimal(credit),
            )
            for code, debit, credit in lines
        ]
        return transaction_service.create_transaction(
            date=booking_date, description=description, lines=journal_lines, **kwargs
        )

    return _book


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
