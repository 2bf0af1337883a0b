"""Mapper functions to convert between domain entities and stored documents.

The ledger is persisted as a single JSON-compatible document. Keys use the
camelCase names of the backup file format so that exported backups and the
stored snapshot share one layout. Money is written as decimal strings and read
back from either strings or numbers.

Reading is forgiving: every top-level field and every settings field falls
back to its default on its own, and a record that cannot be parsed is dropped
with a warning instead of failing the whole load.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, TypeVar

from dateutil import parser as date_parser

from cashpilot.domain import entities as domain
from cashpilot.logging_setup import get_logger

logger = get_logger("cashpilot.database.mappers")

T = TypeVar("T")

_RECORD_ERRORS = (KeyError, TypeError, ValueError, InvalidOperation, AttributeError)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise TypeError("boolean is not an amount")
    return Decimal(str(value))


def _to_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date_parser.isoparse(str(value)).date()


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


# Domain -> document


def account_to_document(account: domain.Account) -> dict[str, Any]:
    """Convert an Account entity to its document form."""
    return {
        "id": account.id,
        "name": account.name,
        "balance": str(account.balance),
        "currency": account.currency,
    }


def transaction_to_document(txn: domain.Transaction) -> dict[str, Any]:
    """Convert a Transaction entity to its document form."""
    doc = {
        "id": txn.id,
        "amount": str(txn.amount),
        "type": txn.type.value,
        "category": txn.category,
        "date": txn.date.isoformat(),
        "accountId": txn.account_id,
    }
    if txn.notes is not None:
        doc["notes"] = txn.notes
    if txn.related_loan_id is not None:
        doc["relatedLoanId"] = txn.related_loan_id
    return doc


def loan_to_document(loan: domain.Loan) -> dict[str, Any]:
    """Convert a Loan entity to its document form."""
    doc = {
        "id": loan.id,
        "type": loan.type.value,
        "counterparty": loan.counterparty,
        "principal": str(loan.principal),
        "interestRate": str(loan.interest_rate),
        "startDate": loan.start_date.isoformat(),
        "dueDate": loan.due_date.isoformat(),
        "status": loan.status.value,
        "repayments": list(loan.repayments),
    }
    if loan.notes is not None:
        doc["notes"] = loan.notes
    return doc


def settings_to_document(settings: domain.UserSettings) -> dict[str, Any]:
    """Convert UserSettings to its document form."""
    return {
        "currency": settings.currency,
        "darkMode": settings.dark_mode,
        "categories": {
            "income": list(settings.categories.income),
            "expense": list(settings.categories.expense),
        },
    }


def state_to_document(state: domain.LedgerState) -> dict[str, Any]:
    """Convert the whole ledger to one JSON-compatible document."""
    return {
        "transactions": [transaction_to_document(t) for t in state.transactions],
        "loans": [loan_to_document(l) for l in state.loans],
        "accounts": [account_to_document(a) for a in state.accounts],
        "settings": settings_to_document(state.settings),
    }


# Document -> domain


def account_from_document(doc: dict[str, Any]) -> domain.Account:
    """Build an Account entity from its document form."""
    return domain.Account(
        id=str(doc["id"]),
        name=str(doc["name"]),
        currency=str(doc.get("currency") or "USD"),
        balance=_to_decimal(doc.get("balance", 0)),
    )


def transaction_from_document(doc: dict[str, Any]) -> domain.Transaction:
    """Build a Transaction entity from its document form."""
    return domain.Transaction(
        id=str(doc["id"]),
        amount=_to_decimal(doc["amount"]),
        type=domain.TransactionType(doc["type"]),
        category=str(doc.get("category") or ""),
        date=_to_date(doc["date"]),
        account_id=str(doc["accountId"]),
        notes=_optional_str(doc.get("notes")),
        related_loan_id=_optional_str(doc.get("relatedLoanId")),
    )


def loan_from_document(doc: dict[str, Any]) -> domain.Loan:
    """Build a Loan entity from its document form.

    Older snapshots may carry an OVERDUE status; overdue is derived at read
    time now, so such loans load as ACTIVE.
    """
    status = doc.get("status", domain.LoanStatus.ACTIVE.value)
    if status not in {s.value for s in domain.LoanStatus}:
        status = domain.LoanStatus.ACTIVE.value
    return domain.Loan(
        id=str(doc["id"]),
        type=domain.LoanType(doc["type"]),
        counterparty=str(doc.get("counterparty") or ""),
        principal=_to_decimal(doc["principal"]),
        interest_rate=_to_decimal(doc.get("interestRate") or 0),
        start_date=_to_date(doc["startDate"]),
        due_date=_to_date(doc["dueDate"]),
        status=domain.LoanStatus(status),
        notes=_optional_str(doc.get("notes")),
        repayments=tuple(str(r) for r in doc.get("repayments") or ()),
    )


def _records(value: Any, build: Callable[[dict[str, Any]], T], kind: str) -> Optional[tuple[T, ...]]:
    """Parse a list of records, dropping the ones that do not parse.

    Returns None when ``value`` is not a list at all.
    """
    if not isinstance(value, list):
        return None
    parsed = []
    for index, raw in enumerate(value):
        try:
            parsed.append(build(raw))
        except _RECORD_ERRORS as e:
            logger.warning("Skipping malformed %s record at index %d: %s", kind, index, e)
    return tuple(parsed)


def _string_list(value: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if not isinstance(value, list):
        return default
    return tuple(str(v) for v in value)


def settings_from_document(doc: Any) -> domain.UserSettings:
    """Build UserSettings, taking each missing or malformed field from the defaults."""
    defaults = domain.UserSettings()
    if not isinstance(doc, dict):
        return defaults

    currency = doc.get("currency")
    dark_mode = doc.get("darkMode")
    categories = doc.get("categories")
    if not isinstance(categories, dict):
        categories = {}

    return domain.UserSettings(
        currency=currency if isinstance(currency, str) and currency else defaults.currency,
        dark_mode=dark_mode if isinstance(dark_mode, bool) else defaults.dark_mode,
        categories=domain.CategoryLists(
            income=_string_list(categories.get("income"), defaults.categories.income),
            expense=_string_list(categories.get("expense"), defaults.categories.expense),
        ),
    )


def state_from_document(doc: Any) -> domain.LedgerState:
    """Merge a stored document with the defaults, field by field."""
    default = domain.default_state()
    if not isinstance(doc, dict):
        return default

    transactions = _records(doc.get("transactions"), transaction_from_document, "transaction")
    loans = _records(doc.get("loans"), loan_from_document, "loan")
    accounts = _records(doc.get("accounts"), account_from_document, "account")

    return domain.LedgerState(
        transactions=transactions if transactions is not None else default.transactions,
        loans=loans if loans is not None else default.loans,
        # A ledger always has at least one account to receive loan principals.
        accounts=accounts if accounts else default.accounts,
        settings=settings_from_document(doc.get("settings")),
    )
