"""Tests for the ledger session service."""

from datetime import date
from decimal import Decimal

import pytest

from cashpilot.domain.entities import (
    CategoryKind,
    LoanDraft,
    LoanStatus,
    LoanType,
    RepaymentDraft,
    TransactionDraft,
    TransactionType,
)
from cashpilot.domain.errors import (
    AuthenticationError,
    DependencyError,
    StorageError,
    ValidationError,
)
from cashpilot.domain.ledger_service import LedgerService


def expense_draft(amount="50", account_id="acc_1"):
    return TransactionDraft(
        amount=Decimal(amount),
        type=TransactionType.EXPENSE,
        category="Food",
        date=date(2024, 1, 15),
        account_id=account_id,
    )


def test_open_without_pin_loads_defaults(ledger_service):
    """A fresh store opens straight away with the default ledger."""
    assert ledger_service.is_authenticated
    assert not ledger_service.has_pin
    assert ledger_service.state.accounts[0].id == "acc_1"


def test_changes_are_persisted(ledger_service, temp_store):
    txn = ledger_service.add_transaction(expense_draft("12.34"))

    reloaded = LedgerService(temp_store)
    assert reloaded.open()
    assert reloaded.state.get_transaction(txn.id).amount == Decimal("12.34")
    assert reloaded.state.get_account("acc_1").balance == Decimal("-12.34")


def test_failed_save_keeps_in_memory_state(ledger_service, temp_store, monkeypatch):
    """A storage failure is logged; the transition still happens."""

    def broken_save(state):
        raise StorageError("disk full")

    monkeypatch.setattr(temp_store, "save", broken_save)

    txn = ledger_service.add_transaction(expense_draft("5"))
    assert ledger_service.state.get_transaction(txn.id) is not None
    assert ledger_service.state.get_account("acc_1").balance == Decimal("-5")


def test_noop_operation_is_not_saved(ledger_service, temp_store, monkeypatch):
    calls = []
    monkeypatch.setattr(temp_store, "save", lambda state: calls.append(state))

    assert ledger_service.delete_transaction("missing") is False
    assert ledger_service.delete_loan("missing") is False
    assert ledger_service.remove_account("missing") is False
    assert calls == []


def test_update_unknown_transaction_returns_none(ledger_service):
    from cashpilot.domain.entities import Transaction

    ghost = Transaction(
        id="tx_ghost",
        amount=Decimal("1"),
        type=TransactionType.INCOME,
        category="Gift",
        date=date(2024, 1, 1),
        account_id="acc_1",
    )
    assert ledger_service.update_transaction(ghost) is None


def test_update_and_delete_transaction(ledger_service):
    from dataclasses import replace

    txn = ledger_service.add_transaction(expense_draft("50"))
    updated = ledger_service.update_transaction(replace(txn, amount=Decimal("80")))
    assert updated.amount == Decimal("80")
    assert ledger_service.state.get_account("acc_1").balance == Decimal("-80")

    assert ledger_service.delete_transaction(txn.id) is True
    assert ledger_service.state.get_account("acc_1").balance == Decimal("0")


def test_loan_lifecycle(ledger_service):
    loan = ledger_service.add_loan(
        LoanDraft(
            type=LoanType.GIVEN,
            counterparty="Bob",
            principal=Decimal("200"),
            start_date=date(2024, 1, 1),
            due_date=date(2024, 3, 1),
        )
    )
    assert loan.id.startswith("loan_")
    assert ledger_service.state.get_account("acc_1").balance == Decimal("-200")

    txn = ledger_service.add_repayment(
        loan.id, RepaymentDraft(amount=Decimal("200"), account_id="acc_1", date=date(2024, 2, 1))
    )
    assert txn.type is TransactionType.INCOME
    assert ledger_service.state.get_loan(loan.id).status is LoanStatus.PAID

    assert ledger_service.delete_loan(loan.id) is True
    assert ledger_service.state.loans == ()
    assert ledger_service.state.transactions == ()


def test_repayment_on_unknown_loan_returns_none(ledger_service):
    draft = RepaymentDraft(amount=Decimal("1"), account_id="acc_1", date=date(2024, 1, 1))
    assert ledger_service.add_repayment("loan_missing", draft) is None


def test_accounts(ledger_service):
    account = ledger_service.add_account("  Savings ", "eur")
    assert account.name == "Savings"
    assert account.currency == "EUR"

    ledger_service.add_transaction(expense_draft(account_id=account.id))
    with pytest.raises(DependencyError):
        ledger_service.remove_account(account.id)
    assert ledger_service.remove_account("acc_unknown") is False


def test_add_account_requires_name(ledger_service):
    with pytest.raises(ValidationError):
        ledger_service.add_account(" ", "USD")


def test_categories_and_settings(ledger_service):
    ledger_service.add_category(CategoryKind.EXPENSE, "  Pets ")
    assert ledger_service.state.settings.categories.expense[-1] == "Pets"

    ledger_service.remove_category(CategoryKind.EXPENSE, "Pets")
    assert "Pets" not in ledger_service.state.settings.categories.expense

    ledger_service.update_settings(dark_mode=True)
    assert ledger_service.state.settings.dark_mode is True

    with pytest.raises(ValidationError):
        ledger_service.add_category(CategoryKind.INCOME, "")


class TestPin:
    """PIN protection of the session."""

    def test_set_pin_locks_next_session(self, ledger_service, temp_store):
        ledger_service.set_pin("1234")
        assert ledger_service.has_pin

        locked = LedgerService(temp_store)
        assert locked.open() is False
        assert not locked.is_authenticated
        with pytest.raises(AuthenticationError):
            _ = locked.state

    def test_login(self, ledger_service, temp_store):
        ledger_service.add_transaction(expense_draft("3"))
        ledger_service.set_pin("1234")

        session = LedgerService(temp_store)
        assert session.login("0000") is False
        assert session.login("1234") is True
        assert len(session.state.transactions) == 1

    def test_pin_is_not_stored_in_plain_text(self, ledger_service, temp_store):
        from cashpilot.database.models import CREDENTIAL_KEY

        ledger_service.set_pin("1234")
        stored = temp_store._get_value(CREDENTIAL_KEY)
        assert stored != "1234"
        assert stored.startswith("pbkdf2_sha256$")

    def test_remove_pin(self, ledger_service, temp_store):
        ledger_service.set_pin("1234")
        ledger_service.remove_pin()
        assert LedgerService(temp_store).open() is True

    def test_empty_pin_rejected(self, ledger_service):
        with pytest.raises(ValidationError):
            ledger_service.set_pin("  ")

    def test_logout_locks(self, ledger_service):
        ledger_service.logout()
        with pytest.raises(AuthenticationError):
            ledger_service.add_transaction(expense_draft())
