"""Loan status engine.

Loan status is always derived from the repayment transactions currently in
the ledger, never advanced incrementally. A loan can therefore go back from
PAID to ACTIVE when a repayment is deleted or reduced.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable

from cashpilot.domain.entities import EPSILON, LedgerState, Loan, LoanStatus, Transaction


def total_due(loan: Loan) -> Decimal:
    """Principal plus simple interest at the loan's fixed rate."""
    return loan.principal * (1 + loan.interest_rate / Decimal(100))


def total_repaid(transactions: Iterable[Transaction], loan: Loan) -> Decimal:
    """Sum the amounts of the given transactions that are repayments of a loan.

    Args:
        transactions: The transaction list to recompute from
        loan: Loan whose ``repayments`` ids select the transactions

    Returns:
        Total repaid amount
    """
    repayment_ids = set(loan.repayments)
    return sum(
        (txn.amount for txn in transactions if txn.id in repayment_ids),
        Decimal("0"),
    )


def derive_status(loan: Loan, repaid_amount: Decimal) -> LoanStatus:
    """Return PAID when the repaid amount covers the total due (within a cent)."""
    if repaid_amount >= total_due(loan) - EPSILON:
        return LoanStatus.PAID
    return LoanStatus.ACTIVE


def refresh_loan(loan: Loan, transactions: Iterable[Transaction]) -> Loan:
    """Return the loan with its status recomputed from ``transactions``."""
    status = derive_status(loan, total_repaid(transactions, loan))
    if status is loan.status:
        return loan
    return replace(loan, status=status)


def remaining(state: LedgerState, loan: Loan) -> Decimal:
    """Amount still owed, never below zero."""
    return max(total_due(loan) - total_repaid(state.transactions, loan), Decimal("0"))


def repayment_progress(state: LedgerState, loan: Loan) -> Decimal:
    """Repaid share of the total due as a percentage capped at 100."""
    due = total_due(loan)
    if due == 0:
        return Decimal("100")
    return min(total_repaid(state.transactions, loan) / due * 100, Decimal("100"))


def is_overdue(loan: Loan, today: date) -> bool:
    """Whether an active loan is past its due date. Display only."""
    return loan.status is LoanStatus.ACTIVE and loan.due_date < today
