"""Tests for database mappers."""

from datetime import date
from decimal import Decimal

from cashpilot.database.mappers import (
    account_from_document,
    loan_from_document,
    settings_from_document,
    state_from_document,
    state_to_document,
    transaction_from_document,
    transaction_to_document,
)
from cashpilot.domain.entities import (
    DEFAULT_ACCOUNT,
    DEFAULT_CATEGORIES,
    Account,
    CategoryLists,
    LedgerState,
    Loan,
    LoanStatus,
    LoanType,
    Transaction,
    TransactionType,
    UserSettings,
)


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_document(self):
        """Keys are camelCase and money is a string."""
        txn = Transaction(
            id="tx_1",
            amount=Decimal("12.50"),
            type=TransactionType.EXPENSE,
            category="Food",
            date=date(2024, 1, 15),
            account_id="acc_1",
            related_loan_id="loan_1",
        )
        doc = transaction_to_document(txn)

        assert doc == {
            "id": "tx_1",
            "amount": "12.50",
            "type": "EXPENSE",
            "category": "Food",
            "date": "2024-01-15",
            "accountId": "acc_1",
            "relatedLoanId": "loan_1",
        }

    def test_transaction_from_document_accepts_numbers(self):
        doc = {
            "id": "tx_1",
            "amount": 19.99,
            "type": "INCOME",
            "category": "Gift",
            "date": "2024-01-15T10:30:00.000Z",
            "accountId": "acc_1",
            "notes": "",
        }
        txn = transaction_from_document(doc)

        assert txn.amount == Decimal("19.99")
        assert txn.type is TransactionType.INCOME
        assert txn.date == date(2024, 1, 15)
        assert txn.notes is None
        assert txn.related_loan_id is None


class TestLoanMapper:
    """Tests for Loan mapper."""

    def _doc(self, **overrides):
        doc = {
            "id": "loan_1",
            "type": "GIVEN",
            "counterparty": "Alice",
            "principal": "500",
            "interestRate": 10,
            "startDate": "2024-01-01",
            "dueDate": "2024-06-01",
            "status": "ACTIVE",
            "repayments": ["tx_1"],
        }
        doc.update(overrides)
        return doc

    def test_loan_from_document(self):
        loan = loan_from_document(self._doc())
        assert loan.type is LoanType.GIVEN
        assert loan.principal == Decimal("500")
        assert loan.interest_rate == Decimal("10")
        assert loan.repayments == ("tx_1",)
        assert loan.due_date == date(2024, 6, 1)

    def test_overdue_status_loads_as_active(self):
        """Overdue is derived, so a stored OVERDUE becomes ACTIVE."""
        assert loan_from_document(self._doc(status="OVERDUE")).status is LoanStatus.ACTIVE

    def test_missing_optional_fields(self):
        doc = self._doc()
        del doc["interestRate"], doc["repayments"], doc["status"]
        loan = loan_from_document(doc)
        assert loan.interest_rate == Decimal("0")
        assert loan.repayments == ()
        assert loan.status is LoanStatus.ACTIVE


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_from_document_defaults(self):
        account = account_from_document({"id": "acc_9", "name": "Cash"})
        assert account == Account(id="acc_9", name="Cash", currency="USD", balance=Decimal("0"))


class TestSettingsMapper:
    """Settings fall back to defaults one field at a time."""

    def test_non_dict_gives_defaults(self):
        assert settings_from_document("nonsense") == UserSettings()

    def test_partial_settings(self):
        settings = settings_from_document(
            {"currency": "EUR", "darkMode": "yes", "categories": {"income": ["Salary"]}}
        )
        assert settings.currency == "EUR"
        assert settings.dark_mode is False
        assert settings.categories.income == ("Salary",)
        assert settings.categories.expense == DEFAULT_CATEGORIES.expense


class TestStateMapper:
    """Whole-ledger documents."""

    def test_round_trip(self):
        state = LedgerState(
            accounts=(Account(id="acc_1", name="Main", currency="EUR", balance=Decimal("-3.20")),),
            transactions=(
                Transaction(
                    id="tx_1",
                    amount=Decimal("3.20"),
                    type=TransactionType.EXPENSE,
                    category="Coffee",
                    date=date(2024, 5, 2),
                    account_id="acc_1",
                    notes='said "hi"',
                ),
            ),
            loans=(
                Loan(
                    id="loan_1",
                    type=LoanType.TAKEN,
                    counterparty="Bank",
                    principal=Decimal("1000"),
                    start_date=date(2024, 1, 1),
                    due_date=date(2025, 1, 1),
                    status=LoanStatus.PAID,
                ),
            ),
            settings=UserSettings(
                currency="EUR", dark_mode=True, categories=CategoryLists(("A",), ("B",))
            ),
        )
        assert state_from_document(state_to_document(state)) == state

    def test_empty_document_gives_defaults(self):
        state = state_from_document({})
        assert state.accounts == (DEFAULT_ACCOUNT,)
        assert state.transactions == ()
        assert state.settings == UserSettings()

    def test_malformed_records_are_skipped(self):
        doc = {
            "transactions": [
                {"id": "good", "amount": "1", "type": "INCOME", "category": "Gift",
                 "date": "2024-01-01", "accountId": "acc_1"},
                {"id": "bad-type", "amount": "1", "type": "REPAYMENT", "category": "x",
                 "date": "2024-01-01", "accountId": "acc_1"},
                {"id": "no-date", "amount": "1", "type": "INCOME", "accountId": "acc_1"},
                "not a record",
            ],
            "accounts": [{"id": "acc_1", "name": "Main", "balance": "abc"}],
        }
        state = state_from_document(doc)
        assert [t.id for t in state.transactions] == ["good"]
        # The only account was malformed, so the default one is used
        assert state.accounts == (DEFAULT_ACCOUNT,)

    def test_non_list_fields_fall_back(self):
        state = state_from_document({"transactions": "oops", "loans": None, "settings": []})
        assert state.transactions == ()
        assert state.loans == ()
        assert state.settings == UserSettings()
