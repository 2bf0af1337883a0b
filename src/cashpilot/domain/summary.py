"""Read-only reports over a ledger."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from cashpilot.domain.entities import LedgerState, Loan, LoanStatus, Transaction, TransactionType
from cashpilot.domain.loan_status import is_overdue
from cashpilot.utils.date_parser import get_date_range

# Transaction kind filter value that selects loan-linked transactions.
REPAYMENT_FILTER = "REPAYMENT"


@dataclass(frozen=True)
class Dashboard:
    """Headline figures for a period."""

    currency: str
    total_balance: Decimal
    income: Decimal
    expense: Decimal
    active_loans: tuple[Loan, ...]
    overdue_loans: tuple[Loan, ...]

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class MonthlyTotal:
    """Income and expense for one calendar month (``YYYY-MM``)."""

    month: str
    income: Decimal
    expense: Decimal


def filter_transactions(
    state: LedgerState,
    period: str = "all",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    kind: Optional[str] = None,
    search: Optional[str] = None,
    today: Optional[date] = None,
) -> list[Transaction]:
    """Select transactions, newest first.

    Args:
        state: Ledger to read
        period: Named period (see ``get_date_range``) or "custom"
        start_date: Inclusive start for the custom period
        end_date: Inclusive end for the custom period
        kind: "INCOME", "EXPENSE" or "REPAYMENT" (any loan-linked transaction)
        search: Case-insensitive text matched against category and notes
        today: Reference date for relative periods (defaults to today)

    Returns:
        Matching transactions sorted by date, newest first
    """
    if period.strip().lower() == "custom":
        # An incomplete custom range does not filter at all.
        if start_date is not None and end_date is not None:
            start, end = start_date, end_date
        else:
            start, end = None, None
    else:
        start, end = get_date_range(period, today=today)

    needle = search.strip().lower() if search else ""
    kind = kind.upper() if kind else None

    selected = []
    for txn in state.transactions:
        if start is not None and txn.date < start:
            continue
        if end is not None and txn.date > end:
            continue
        if kind == REPAYMENT_FILTER:
            if txn.related_loan_id is None:
                continue
        elif kind is not None and txn.type.value != kind:
            continue
        if needle and needle not in txn.category.lower() and needle not in (txn.notes or "").lower():
            continue
        selected.append(txn)

    return sorted(selected, key=lambda t: t.date, reverse=True)


def total_balance(state: LedgerState) -> Decimal:
    """Sum of all account balances, regardless of currency."""
    return sum((acc.balance for acc in state.accounts), Decimal("0"))


def _sum_by_type(transactions: list[Transaction], txn_type: TransactionType) -> Decimal:
    return sum((t.amount for t in transactions if t.type is txn_type), Decimal("0"))


def active_loans(state: LedgerState) -> tuple[Loan, ...]:
    return tuple(loan for loan in state.loans if loan.status is LoanStatus.ACTIVE)


def overdue_loans(state: LedgerState, today: Optional[date] = None) -> tuple[Loan, ...]:
    today = today or date.today()
    return tuple(loan for loan in state.loans if is_overdue(loan, today))


def build_dashboard(
    state: LedgerState,
    period: str = "all",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> Dashboard:
    """Build the dashboard figures for a period."""
    transactions = filter_transactions(
        state, period=period, start_date=start_date, end_date=end_date, today=today
    )
    return Dashboard(
        currency=state.settings.currency,
        total_balance=total_balance(state),
        income=_sum_by_type(transactions, TransactionType.INCOME),
        expense=_sum_by_type(transactions, TransactionType.EXPENSE),
        active_loans=active_loans(state),
        overdue_loans=overdue_loans(state, today),
    )


def monthly_totals(state: LedgerState) -> list[MonthlyTotal]:
    """Income and expense per month, oldest month first."""
    income: dict[str, Decimal] = defaultdict(Decimal)
    expense: dict[str, Decimal] = defaultdict(Decimal)
    for txn in state.transactions:
        month = txn.date.strftime("%Y-%m")
        if txn.type is TransactionType.INCOME:
            income[month] += txn.amount
        else:
            expense[month] += txn.amount

    months = sorted(set(income) | set(expense))
    return [
        MonthlyTotal(month=m, income=income.get(m, Decimal("0")), expense=expense.get(m, Decimal("0")))
        for m in months
    ]


def expenses_by_category(state: LedgerState) -> dict[str, Decimal]:
    """Expense totals per category, largest first."""
    totals: dict[str, Decimal] = defaultdict(Decimal)
    for txn in state.transactions:
        if txn.type is TransactionType.EXPENSE:
            totals[txn.category] += txn.amount
    return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))
