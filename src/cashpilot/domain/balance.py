"""Balance reconciliation.

Pure functions computing the signed effect of a transaction on its account
and applying or reversing that effect on a ledger state.
"""

from dataclasses import replace
from decimal import Decimal

from cashpilot.domain.entities import LedgerState, Transaction, TransactionType


def effect(txn: Transaction) -> Decimal:
    """Return the signed balance effect of a transaction.

    Raises:
        ValueError: If the transaction carries a type with no balance direction
    """
    if txn.type is TransactionType.INCOME:
        return txn.amount
    if txn.type is TransactionType.EXPENSE:
        return -txn.amount
    raise ValueError(f"Transaction {txn.id} has no balance direction: {txn.type!r}")


def _adjust(state: LedgerState, account_id: str, delta: Decimal) -> LedgerState:
    # Unknown accounts are left alone; the transaction simply has no effect.
    if state.get_account(account_id) is None:
        return state
    accounts = tuple(
        replace(acc, balance=acc.balance + delta) if acc.id == account_id else acc
        for acc in state.accounts
    )
    return replace(state, accounts=accounts)


def apply_effect(state: LedgerState, txn: Transaction) -> LedgerState:
    """Add the transaction's effect to the balance of its account."""
    return _adjust(state, txn.account_id, effect(txn))


def reverse_effect(state: LedgerState, txn: Transaction) -> LedgerState:
    """Subtract the transaction's effect from the balance of its account."""
    return _adjust(state, txn.account_id, -effect(txn))


def recompute_balance(state: LedgerState, account_id: str) -> Decimal:
    """Sum the effects of every transaction referencing an account.

    The ledger never uses this to maintain balances; it is the from-scratch
    reference used to audit the incrementally maintained value.
    """
    return sum(
        (effect(txn) for txn in state.transactions if txn.account_id == account_id),
        Decimal("0"),
    )
