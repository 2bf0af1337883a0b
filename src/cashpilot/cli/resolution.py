"""CLI helpers for resolving user-typed references to ledger ids."""

from __future__ import annotations

from typing import Iterable

import click
from cashpilot.domain.entities import LedgerState
from cashpilot.utils.account_resolver import resolve_account


def resolve_account_or_exit(ctx: click.Context, state: LedgerState, account: str) -> str:
    """Resolve account name, position or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(state, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def _resolve_prefix(ids: Iterable[str], ref: str, what: str) -> str:
    ids = list(ids)
    if ref in ids:
        return ref
    matches = [i for i in ids if i.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise ValueError(f"{what} '{ref}' not found")
    raise ValueError(f"{what} '{ref}' is ambiguous ({len(matches)} matches)")


def resolve_transaction_or_exit(ctx: click.Context, state: LedgerState, ref: str) -> str:
    """Resolve a transaction ID or unique ID prefix."""
    try:
        return _resolve_prefix((t.id for t in state.transactions), ref, "Transaction")
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_loan_or_exit(ctx: click.Context, state: LedgerState, ref: str) -> str:
    """Resolve a loan ID or unique ID prefix."""
    try:
        return _resolve_prefix((l.id for l in state.loans), ref, "Loan")
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
