"""Ledger session service.

Holds the one ``LedgerState`` of a user session, runs ledger operations
against it and persists the result after every successful transition. A
failed save is logged and never rolls back the in-memory state.
"""

from typing import TYPE_CHECKING, Any, Callable, Optional

from cashpilot.domain import ledger
from cashpilot.domain.entities import (
    Account,
    CategoryKind,
    LedgerState,
    Loan,
    LoanDraft,
    RepaymentDraft,
    Transaction,
    TransactionDraft,
    default_state,
    new_id,
)
from cashpilot.domain.errors import AuthenticationError, StorageError, ValidationError
from cashpilot.logging_setup import get_logger

if TYPE_CHECKING:
    from cashpilot.database.base import LedgerStore

logger = get_logger("cashpilot.domain.ledger_service")


class LedgerService:
    """Service for running ledger operations against a persistent store."""

    def __init__(self, store: "LedgerStore"):
        """Initialize ledger service.

        Args:
            store: Store holding the ledger snapshot and the PIN
        """
        self.store = store
        self._state: LedgerState = default_state()
        self._authenticated = False

    # Session

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    @property
    def has_pin(self) -> bool:
        return self.store.has_credential()

    @property
    def state(self) -> LedgerState:
        """Current ledger.

        Raises:
            AuthenticationError: If the ledger is still locked
        """
        if not self._authenticated:
            raise AuthenticationError("Ledger is locked. Enter your PIN first.")
        return self._state

    def _require_open(self) -> LedgerState:
        return self.state

    def open(self) -> bool:
        """Load the ledger if no PIN protects it.

        Returns:
            True if the ledger is now open, False if a PIN is required
        """
        if self.store.has_credential():
            return False
        self._state = self.store.load()
        self._authenticated = True
        return True

    def login(self, pin: str) -> bool:
        """Unlock the ledger with a PIN and load it."""
        if not self.store.verify_credential(pin):
            logger.warning("Rejected PIN attempt")
            return False
        self._state = self.store.load()
        self._authenticated = True
        return True

    def set_pin(self, pin: str) -> None:
        """Set or change the PIN, opening the ledger if it was not open yet.

        Raises:
            ValidationError: If the PIN is empty
        """
        if not pin or not pin.strip():
            raise ValidationError("PIN must not be empty")
        self.store.set_credential(pin)
        if not self._authenticated:
            self._state = self.store.load()
            self._authenticated = True

    def remove_pin(self) -> None:
        """Remove PIN protection from an open ledger."""
        self._require_open()
        self.store.remove_credential()

    def logout(self) -> None:
        """Drop the ledger from memory and lock the session."""
        self._state = default_state()
        self._authenticated = False

    def refresh(self) -> LedgerState:
        """Reload the ledger from the store, discarding the in-memory copy."""
        self._require_open()
        self._state = self.store.load()
        return self._state

    def _commit(self, operation: Callable[..., LedgerState], *args: Any, **kwargs: Any) -> LedgerState:
        """Run an operation and persist the resulting state."""
        new_state = operation(self.state, *args, **kwargs)
        if new_state is self._state:
            return new_state
        self._state = new_state
        try:
            self.store.save(new_state)
        except StorageError as e:
            logger.error("Failed to persist ledger: %s", e)
        return new_state

    # Transactions

    def add_transaction(self, draft: TransactionDraft) -> Transaction:
        """Add a manually entered transaction."""
        txn = draft.to_transaction()
        self._commit(ledger.add_transaction, txn)
        return txn

    def update_transaction(self, txn: Transaction) -> Optional[Transaction]:
        """Replace a transaction. Returns None if its id is unknown."""
        before = self.state
        if self._commit(ledger.update_transaction, txn) is before:
            return None
        return txn

    def delete_transaction(self, transaction_id: str) -> bool:
        """Delete a transaction. Returns False if its id is unknown."""
        before = self.state
        return self._commit(ledger.delete_transaction, transaction_id) is not before

    # Loans

    def add_loan(self, draft: LoanDraft) -> Loan:
        """Create a loan and its principal transaction."""
        loan_id = new_id("loan")
        state = self._commit(ledger.add_loan, draft, loan_id=loan_id)
        return state.get_loan(loan_id)

    def add_repayment(self, loan_id: str, draft: RepaymentDraft) -> Optional[Transaction]:
        """Record a repayment. Returns None if the loan is unknown."""
        transaction_id = new_id("tx")
        state = self._commit(ledger.add_repayment, loan_id, draft, transaction_id=transaction_id)
        return state.get_transaction(transaction_id)

    def delete_loan(self, loan_id: str) -> bool:
        """Delete a loan and its transactions. Returns False if its id is unknown."""
        before = self.state
        return self._commit(ledger.delete_loan, loan_id) is not before

    # Settings and categories

    def update_settings(self, **changes: Any) -> LedgerState:
        return self._commit(ledger.update_settings, **changes)

    def add_category(self, kind: CategoryKind, name: str) -> LedgerState:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        return self._commit(ledger.add_category, kind, name.strip())

    def remove_category(self, kind: CategoryKind, name: str) -> LedgerState:
        return self._commit(ledger.remove_category, kind, name)

    # Accounts

    def add_account(self, name: str, currency: str) -> Account:
        """Create an account with a zero balance.

        Raises:
            ValidationError: If the name or currency is empty
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        if not currency or not currency.strip():
            raise ValidationError("Currency is required")
        account_id = new_id("acc")
        state = self._commit(
            ledger.add_account, name.strip(), currency.strip().upper(), account_id=account_id
        )
        return state.get_account(account_id)

    def remove_account(self, account_id: str) -> bool:
        """Remove an account. Returns False if its id is unknown.

        Raises:
            DependencyError: If transactions still reference the account
        """
        before = self.state
        return self._commit(ledger.remove_account, account_id) is not before
