"""Utility for resolving account names to IDs."""

from cashpilot.domain.entities import LedgerState


def resolve_account(state: LedgerState, account: str) -> str:
    """Resolve an account ID, name, or 1-based list position to an account ID.

    Args:
        state: Ledger holding the accounts
        account: Account ID (e.g. "acc_1"), exact name, or position in the
            account list as shown by ``account list``

    Returns:
        Account ID

    Raises:
        ValueError: If no account matches
    """
    if state.get_account(account) is not None:
        return account

    for acc in state.accounts:
        if acc.name == account:
            return acc.id

    # Positions are what the account list prints next to each account
    if account.isdigit():
        position = int(account)
        if 1 <= position <= len(state.accounts):
            return state.accounts[position - 1].id
        raise ValueError(f"Account #{position} not found")

    raise ValueError(f"Account '{account}' not found")
