"""Transaction management commands."""

from dataclasses import replace

import click
from cashpilot.cli.display import format_money, short_id
from cashpilot.cli.error_handling import handle_domain_error
from cashpilot.cli.resolution import resolve_account_or_exit, resolve_transaction_or_exit
from cashpilot.domain.entities import TransactionType
from cashpilot.domain.errors import DomainError
from cashpilot.domain.summary import filter_transactions
from cashpilot.utils.amount_parser import parse_amount
from cashpilot.utils.date_parser import PERIODS, parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option(
    "--period",
    type=click.Choice(list(PERIODS) + ["custom"], case_sensitive=False),
    default="all",
    show_default=True,
    help="Reporting period",
)
@click.option("--start-date", help="Start date for --period custom")
@click.option("--end-date", help="End date for --period custom")
@click.option(
    "--type",
    "kind",
    type=click.Choice(["income", "expense", "repayment"], case_sensitive=False),
    help="Only this kind of transaction (repayment = linked to a loan)",
)
@click.option("--search", help="Text to look for in category or notes")
@click.option("--verbose", "-v", is_flag=True, help="Show all fields including notes and loan link")
@click.pass_context
def list_transactions(
    ctx,
    period: str,
    start_date: str | None,
    end_date: str | None,
    kind: str | None,
    search: str | None,
    verbose: bool,
):
    """View transactions, newest first."""
    state = ctx.obj["service"].state

    start = end = None
    try:
        if start_date:
            start = parse_date(start_date)
        if end_date:
            end = parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    transactions = filter_transactions(
        state, period=period, start_date=start, end_date=end, kind=kind, search=search
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc for acc in state.accounts}
    currency = state.settings.currency

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 80)
        for txn in transactions:
            acc = accounts.get(txn.account_id)
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Date: {txn.date}")
            click.echo(f"  Type: {txn.type.value}")
            click.echo(f"  Amount: {format_money(txn.amount, acc.currency if acc else currency)}")
            click.echo(f"  Category: {txn.category}")
            click.echo(f"  Account: {acc.name if acc else 'Unknown Account'} ({txn.account_id})")
            if txn.notes:
                click.echo(f"  Notes: {txn.notes}")
            if txn.related_loan_id:
                click.echo(f"  Loan: {txn.related_loan_id}")
            click.echo("-" * 80)
    else:
        click.echo("-" * 100)
        click.echo(
            f"{'ID':<14} {'Date':<12} {'Type':<8} {'Amount':>16} {'Account':<18} {'Category':<20}"
        )
        click.echo("-" * 100)
        for txn in transactions:
            acc = accounts.get(txn.account_id)
            amount_str = format_money(txn.amount, acc.currency if acc else currency)
            click.echo(
                f"{short_id(txn.id):<14} {str(txn.date):<12} {txn.type.value:<8} {amount_str:>16} "
                f"{(acc.name if acc else 'Unknown')[:18]:<18} {txn.category[:20]:<20}"
            )

    income = sum(t.amount for t in transactions if t.type is TransactionType.INCOME)
    expense = sum(t.amount for t in transactions if t.type is TransactionType.EXPENSE)
    click.echo("-" * 100)
    click.echo(
        f"TOTAL  Income: {format_money(income, currency)} | "
        f"Expenses: {format_money(expense, currency)} | Count: {len(transactions)}"
    )


@transaction_group.command("update")
@click.argument("transaction_ref", metavar="TRANSACTION_ID")
@click.option("--type", "txn_type", type=click.Choice(["income", "expense"], case_sensitive=False))
@click.option("--amount", help="New amount (e.g., 123.45)")
@click.option("--category", help="New category")
@click.option("--account", help="New account name, position or ID")
@click.option("--date", help="New date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--notes", help="New notes (empty string clears them)")
@click.pass_context
def update_transaction(
    ctx,
    transaction_ref: str,
    txn_type: str | None,
    amount: str | None,
    category: str | None,
    account: str | None,
    date: str | None,
    notes: str | None,
) -> None:
    """Update a transaction.

    Only the given fields change. Balances move with the transaction, and a
    linked loan has its status recomputed.

    Examples:
        cashpilot transaction update tx_3f2a --amount 80
        cashpilot transaction update tx_3f2a --account Savings --notes ""
    """
    service = ctx.obj["service"]
    state = service.state
    transaction_id = resolve_transaction_or_exit(ctx, state, transaction_ref)
    txn = state.get_transaction(transaction_id)

    changes = {}
    if txn_type is not None:
        changes["type"] = TransactionType(txn_type.upper())
    if amount is not None:
        try:
            changes["amount"] = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)
        if changes["amount"] == 0:
            click.echo("Error: Amount must be positive", err=True)
            ctx.exit(1)
    if category is not None:
        if not category.strip():
            click.echo("Error: Category must not be empty", err=True)
            ctx.exit(1)
        changes["category"] = category.strip()
    if account is not None:
        changes["account_id"] = resolve_account_or_exit(ctx, state, account)
    if date is not None:
        try:
            changes["date"] = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)
    if notes is not None:
        changes["notes"] = notes or None

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.update_transaction(replace(txn, **changes))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_ref", metavar="TRANSACTION_ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_ref: str, yes: bool) -> None:
    """Delete a transaction, reversing its effect on balances and loans.

    Examples:
        cashpilot transaction delete tx_3f2a
    """
    service = ctx.obj["service"]
    transaction_id = resolve_transaction_or_exit(ctx, service.state, transaction_ref)

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id}?"
    ):
        click.echo("Deletion cancelled.")
        return

    service.delete_transaction(transaction_id)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
