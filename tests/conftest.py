"""Shared pytest fixtures for cashpilot tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from cashpilot.database.factories import create_sqlite_store
from cashpilot.domain.entities import (
    Account,
    LedgerState,
    Transaction,
    TransactionType,
    UserSettings,
)
from cashpilot.domain.ledger_service import LedgerService


@pytest.fixture
def temp_store():
    """Create a temporary SQLite store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def ledger_service(temp_store):
    """Create an open LedgerService over a temporary store."""
    service = LedgerService(temp_store)
    assert service.open()
    return service


@pytest.fixture
def empty_state():
    """Ledger with two empty accounts, "A" and "B"."""
    return LedgerState(
        accounts=(
            Account(id="A", name="Main", currency="USD"),
            Account(id="B", name="Savings", currency="USD"),
        ),
        settings=UserSettings(),
    )


@pytest.fixture
def make_txn():
    """Factory for transactions with sensible defaults."""

    def _make(
        txn_id: str = "t1",
        amount: str = "100",
        txn_type: TransactionType = TransactionType.INCOME,
        account_id: str = "A",
        category: str = "Salary",
        on: date = date(2024, 1, 15),
        notes: str | None = None,
        related_loan_id: str | None = None,
    ) -> Transaction:
        return Transaction(
            id=txn_id,
            amount=Decimal(amount),
            type=txn_type,
            category=category,
            date=on,
            account_id=account_id,
            notes=notes,
            related_loan_id=related_loan_id,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
