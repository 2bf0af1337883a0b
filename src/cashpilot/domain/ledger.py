"""Ledger engine.

Every public operation takes the current ``LedgerState`` and returns a new
one. Operations are total: a missing transaction or loan id is logged and the
state is returned unchanged. The only operation that refuses is
``remove_account`` while transactions still reference the account.
"""

from dataclasses import replace
from typing import Any, Optional

from cashpilot.domain import balance
from cashpilot.domain.entities import (
    FALLBACK_ACCOUNT_ID,
    LOAN_PRINCIPAL_CATEGORY,
    LOAN_REPAYMENT_CATEGORY,
    Account,
    CategoryKind,
    CategoryLists,
    LedgerState,
    Loan,
    LoanDraft,
    LoanStatus,
    LoanType,
    RepaymentDraft,
    Transaction,
    TransactionType,
    UserSettings,
    new_id,
)
from cashpilot.domain.errors import (
    DependencyError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    loan_not_found,
    transaction_not_found,
)
from cashpilot.domain.loan_status import refresh_loan
from cashpilot.logging_setup import get_logger

logger = get_logger("cashpilot.domain.ledger")

SETTINGS_FIELDS = ("currency", "dark_mode", "categories")


def _replace_loan(loans: tuple[Loan, ...], updated: Loan) -> tuple[Loan, ...]:
    return tuple(updated if loan.id == updated.id else loan for loan in loans)


def _principal_direction(loan_type: LoanType) -> TransactionType:
    # Lending money out costs the lender; borrowing brings money in.
    return TransactionType.EXPENSE if loan_type is LoanType.GIVEN else TransactionType.INCOME


def _repayment_direction(loan_type: LoanType) -> TransactionType:
    return TransactionType.INCOME if loan_type is LoanType.GIVEN else TransactionType.EXPENSE


# Transactions


def add_transaction(state: LedgerState, txn: Transaction) -> LedgerState:
    """Prepend a transaction and apply its balance effect."""
    state = replace(state, transactions=(txn,) + state.transactions)
    return balance.apply_effect(state, txn)


def update_transaction(state: LedgerState, updated: Transaction) -> LedgerState:
    """Replace a transaction by id, moving its balance effect accordingly.

    The old effect is reversed on the old account and the new effect applied
    on the new account independently, so amount, type and account changes are
    all handled the same way. Loans linked before or after the edit have
    their status recomputed from the updated transaction list.
    """
    old = state.get_transaction(updated.id)
    if old is None:
        logger.warning("%s; update skipped", transaction_not_found(updated.id))
        return state

    state = balance.reverse_effect(state, old)
    state = balance.apply_effect(state, updated)
    transactions = tuple(
        updated if txn.id == updated.id else txn for txn in state.transactions
    )

    loans = state.loans
    for loan_id in {old.related_loan_id, updated.related_loan_id} - {None}:
        loan = state.get_loan(loan_id)
        if loan is None:
            logger.warning("Transaction %s references missing loan %s", updated.id, loan_id)
            continue
        loans = _replace_loan(loans, refresh_loan(loan, transactions))

    return replace(state, transactions=transactions, loans=loans)


def delete_transaction(state: LedgerState, transaction_id: str) -> LedgerState:
    """Remove a transaction and undo everything adding it did.

    A linked loan loses the transaction from its repayments and has its status
    recomputed from the remaining transactions.
    """
    txn = state.get_transaction(transaction_id)
    if txn is None:
        logger.warning("%s; deletion skipped", transaction_not_found(transaction_id))
        return state

    state = balance.reverse_effect(state, txn)
    remaining = tuple(t for t in state.transactions if t.id != transaction_id)

    loans = state.loans
    if txn.related_loan_id is not None:
        loan = state.get_loan(txn.related_loan_id)
        if loan is None:
            logger.warning(
                "Transaction %s references missing loan %s", transaction_id, txn.related_loan_id
            )
        else:
            repayments = tuple(r for r in loan.repayments if r != transaction_id)
            loan = refresh_loan(replace(loan, repayments=repayments), remaining)
            loans = _replace_loan(loans, loan)

    return replace(state, transactions=remaining, loans=loans)


# Loans


def add_loan(
    state: LedgerState,
    draft: LoanDraft,
    loan_id: Optional[str] = None,
    transaction_id: Optional[str] = None,
) -> LedgerState:
    """Create a loan and the transaction that moves its principal.

    The principal always goes through the first account of the ledger.

    Args:
        state: Current ledger
        draft: Validated loan request
        loan_id: Optional id for the new loan (generated if omitted)
        transaction_id: Optional id for the principal transaction

    Returns:
        New ledger with the loan and its principal transaction prepended
    """
    loan = Loan(
        id=loan_id or new_id("loan"),
        type=draft.type,
        counterparty=draft.counterparty,
        principal=draft.principal,
        interest_rate=draft.interest_rate,
        start_date=draft.start_date,
        due_date=draft.due_date,
        status=LoanStatus.ACTIVE,
        notes=draft.notes,
        repayments=(),
    )
    account_id = state.accounts[0].id if state.accounts else FALLBACK_ACCOUNT_ID
    principal_txn = Transaction(
        id=transaction_id or new_id("tx"),
        amount=draft.principal,
        type=_principal_direction(draft.type),
        category=LOAN_PRINCIPAL_CATEGORY,
        date=draft.start_date,
        account_id=account_id,
        notes=f"Loan {draft.type.value} - {draft.counterparty}",
        related_loan_id=loan.id,
    )
    state = replace(
        state,
        loans=(loan,) + state.loans,
        transactions=(principal_txn,) + state.transactions,
    )
    return balance.apply_effect(state, principal_txn)


def add_repayment(
    state: LedgerState,
    loan_id: str,
    draft: RepaymentDraft,
    transaction_id: Optional[str] = None,
) -> LedgerState:
    """Record a repayment against a loan.

    Repaying a GIVEN loan is income for the lender, repaying a TAKEN loan is
    an expense for the borrower.
    """
    loan = state.get_loan(loan_id)
    if loan is None:
        logger.warning(loan_not_found(loan_id))
        return state

    txn = Transaction(
        id=transaction_id or new_id("tx"),
        amount=draft.amount,
        type=_repayment_direction(loan.type),
        category=LOAN_REPAYMENT_CATEGORY,
        date=draft.date,
        account_id=draft.account_id,
        notes=draft.notes,
        related_loan_id=loan.id,
    )
    transactions = (txn,) + state.transactions
    updated = refresh_loan(replace(loan, repayments=loan.repayments + (txn.id,)), transactions)
    state = replace(
        state,
        transactions=transactions,
        loans=_replace_loan(state.loans, updated),
    )
    return balance.apply_effect(state, txn)


def delete_loan(state: LedgerState, loan_id: str) -> LedgerState:
    """Remove a loan together with its principal and repayment transactions."""
    loan = state.get_loan(loan_id)
    if loan is None:
        logger.warning(loan_not_found(loan_id))
        return state

    for txn in state.transactions:
        if txn.related_loan_id == loan_id:
            state = balance.reverse_effect(state, txn)
    return replace(
        state,
        transactions=tuple(t for t in state.transactions if t.related_loan_id != loan_id),
        loans=tuple(l for l in state.loans if l.id != loan_id),
    )


# Settings and categories


def update_settings(state: LedgerState, **changes: Any) -> LedgerState:
    """Shallow-merge settings fields.

    Raises:
        ValidationError: If an unknown settings field is given
    """
    unknown = sorted(set(changes) - set(SETTINGS_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown settings: {', '.join(unknown)}")
    return replace(state, settings=replace(state.settings, **changes))


def _with_categories(state: LedgerState, kind: CategoryKind, names: tuple[str, ...]) -> LedgerState:
    categories: CategoryLists = state.settings.categories
    if kind is CategoryKind.INCOME:
        categories = replace(categories, income=names)
    else:
        categories = replace(categories, expense=names)
    settings: UserSettings = replace(state.settings, categories=categories)
    return replace(state, settings=settings)


def add_category(state: LedgerState, kind: CategoryKind, name: str) -> LedgerState:
    """Append a category name. Duplicates are not prevented."""
    names = state.settings.categories.for_kind(kind)
    return _with_categories(state, kind, names + (name,))


def remove_category(state: LedgerState, kind: CategoryKind, name: str) -> LedgerState:
    """Drop every occurrence of a category name."""
    names = state.settings.categories.for_kind(kind)
    return _with_categories(state, kind, tuple(n for n in names if n != name))


# Accounts


def add_account(
    state: LedgerState, name: str, currency: str, account_id: Optional[str] = None
) -> LedgerState:
    """Append an account with a zero balance."""
    account = Account(id=account_id or new_id("acc"), name=name, currency=currency)
    return replace(state, accounts=state.accounts + (account,))


def remove_account(state: LedgerState, account_id: str) -> LedgerState:
    """Remove an account that no transaction references.

    Raises:
        DependencyError: If transactions still reference the account
    """
    if state.get_account(account_id) is None:
        logger.warning(account_not_found(account_id))
        return state

    count = sum(1 for txn in state.transactions if txn.account_id == account_id)
    if count:
        raise DependencyError(account_delete_blocked(account_id, count))
    return replace(state, accounts=tuple(a for a in state.accounts if a.id != account_id))
