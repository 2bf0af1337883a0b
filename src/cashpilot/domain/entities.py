"""Domain model entities for cashpilot.

These are pure data classes representing business concepts, independent of
how the ledger is persisted. Every entity is immutable: ledger operations
build new values with ``dataclasses.replace`` instead of mutating in place.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from cashpilot.domain.errors import ValidationError

# Tolerance for loan payoff comparisons (one cent).
EPSILON = Decimal("0.01")

LOAN_PRINCIPAL_CATEGORY = "Loan Principal"
LOAN_REPAYMENT_CATEGORY = "Loan Repayment"

# Account used for a loan principal when the ledger has no accounts at all.
FALLBACK_ACCOUNT_ID = "acc_default"


class TransactionType(str, Enum):
    """Direction of a persisted transaction."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class LoanType(str, Enum):
    """GIVEN means money lent out, TAKEN means money borrowed."""

    GIVEN = "GIVEN"
    TAKEN = "TAKEN"


class LoanStatus(str, Enum):
    """Stored loan status. Overdue is derived at read time, never stored."""

    ACTIVE = "ACTIVE"
    PAID = "PAID"


class CategoryKind(str, Enum):
    """Which category list a category name belongs to."""

    INCOME = "income"
    EXPENSE = "expense"


def new_id(prefix: str) -> str:
    """Return a fresh identifier such as ``tx_3f2a...``."""
    return f"{prefix}_{uuid.uuid4().hex}"


def _require_non_negative(value: Decimal, what: str) -> None:
    if value < 0:
        raise ValidationError(f"{what} must not be negative (got {value})")


def _require_positive(value: Decimal, what: str) -> None:
    if value <= 0:
        raise ValidationError(f"{what} must be positive (got {value})")


@dataclass(frozen=True)
class Account:
    """Named balance bucket."""

    id: str
    name: str
    currency: str
    balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class Transaction:
    """Ledger entry.

    ``amount`` is always stored non-negative; the sign of its effect on the
    account balance comes from ``type``.
    """

    id: str
    amount: Decimal
    type: TransactionType
    category: str
    date: date
    account_id: str
    notes: Optional[str] = None
    related_loan_id: Optional[str] = None

    def __post_init__(self):
        _require_non_negative(self.amount, "Transaction amount")


@dataclass(frozen=True)
class Loan:
    """Borrowing or lending agreement."""

    id: str
    type: LoanType
    counterparty: str
    principal: Decimal
    start_date: date
    due_date: date
    interest_rate: Decimal = Decimal("0")
    status: LoanStatus = LoanStatus.ACTIVE
    notes: Optional[str] = None
    repayments: tuple[str, ...] = ()

    def __post_init__(self):
        _require_non_negative(self.principal, "Loan principal")


@dataclass(frozen=True)
class CategoryLists:
    """Income and expense category names. Duplicates are allowed."""

    income: tuple[str, ...] = ()
    expense: tuple[str, ...] = ()

    def for_kind(self, kind: CategoryKind) -> tuple[str, ...]:
        return self.income if kind is CategoryKind.INCOME else self.expense


DEFAULT_CATEGORIES = CategoryLists(
    income=("Salary", "Freelance", "Investment", "Gift", "Other"),
    expense=(
        "Food",
        "Transport",
        "Rent",
        "Utilities",
        "Entertainment",
        "Health",
        "Shopping",
        "Other",
    ),
)


@dataclass(frozen=True)
class UserSettings:
    """User preferences."""

    currency: str = "USD"
    dark_mode: bool = False
    categories: CategoryLists = DEFAULT_CATEGORIES


@dataclass(frozen=True)
class LedgerState:
    """Aggregate root: the unit of persistence and of every ledger operation."""

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    loans: tuple[Loan, ...] = ()
    settings: UserSettings = field(default_factory=UserSettings)

    def get_account(self, account_id: str) -> Optional[Account]:
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def get_loan(self, loan_id: str) -> Optional[Loan]:
        for loan in self.loans:
            if loan.id == loan_id:
                return loan
        return None


DEFAULT_ACCOUNT = Account(id="acc_1", name="Main Wallet", currency="USD")


def default_state() -> LedgerState:
    """Return the ledger a new user starts with."""
    return LedgerState(accounts=(DEFAULT_ACCOUNT,), settings=UserSettings())


# Request types. These are validated on construction so that invalid user
# input never reaches the ledger operations.


@dataclass(frozen=True)
class TransactionDraft:
    """Input for a manually entered transaction."""

    amount: Decimal
    type: TransactionType
    category: str
    date: date
    account_id: str
    notes: Optional[str] = None

    def __post_init__(self):
        _require_positive(self.amount, "Amount")
        if not self.category or not self.category.strip():
            raise ValidationError("Category is required")
        if not self.account_id:
            raise ValidationError("Account is required")

    def to_transaction(self, transaction_id: Optional[str] = None) -> Transaction:
        """Build a persisted transaction, generating an id if none is given."""
        return Transaction(
            id=transaction_id or new_id("tx"),
            amount=self.amount,
            type=self.type,
            category=self.category.strip(),
            date=self.date,
            account_id=self.account_id,
            notes=self.notes,
        )


@dataclass(frozen=True)
class LoanDraft:
    """Input for a new loan; id, status and repayments are assigned by the ledger."""

    type: LoanType
    counterparty: str
    principal: Decimal
    start_date: date
    due_date: date
    interest_rate: Decimal = Decimal("0")
    notes: Optional[str] = None

    def __post_init__(self):
        if not self.counterparty or not self.counterparty.strip():
            raise ValidationError("Counterparty is required")
        _require_positive(self.principal, "Principal")
        _require_non_negative(self.interest_rate, "Interest rate")


@dataclass(frozen=True)
class RepaymentDraft:
    """Input for a loan repayment.

    Carries no transaction type: the direction is derived from the loan.
    """

    amount: Decimal
    account_id: str
    date: date
    notes: Optional[str] = None

    def __post_init__(self):
        _require_positive(self.amount, "Repayment amount")
        if not self.account_id:
            raise ValidationError("Account is required")
