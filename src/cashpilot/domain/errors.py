"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class ImportFormatError(ValidationError):
    """Backup document is not a structurally valid ledger."""


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def loan_not_found(loan_id: str) -> str:
    """Return message for missing loan."""
    return f"Loan {loan_id} not found"


def account_delete_blocked(account_id: str, transaction_count: int) -> str:
    """Return message when account still has transactions."""
    return (
        f"Cannot delete account {account_id}: it has "
        f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}. "
        "Please reassign or delete them first."
    )


class AuthenticationError(DomainError):
    """Ledger is locked behind a PIN that has not been entered."""


class StorageError(Exception):
    """Reading from or writing to the persistent store failed."""
