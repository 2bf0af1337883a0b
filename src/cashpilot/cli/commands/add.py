"""Add transaction command."""

import click
from cashpilot.cli.display import format_money
from cashpilot.cli.error_handling import handle_domain_error
from cashpilot.cli.resolution import resolve_account_or_exit
from cashpilot.domain.entities import TransactionDraft, TransactionType
from cashpilot.domain.errors import DomainError
from cashpilot.utils.amount_parser import parse_amount
from cashpilot.utils.date_parser import parse_date


@click.command("add")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    required=True,
    help="Transaction type",
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option("--category", required=True, help="Category name (e.g., 'Food')")
@click.option("--account", help="Account name, position or ID (defaults to the first account)")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--notes", help="Notes")
@click.pass_context
def add_transaction(
    ctx,
    txn_type: str,
    amount: str,
    category: str,
    account: str | None,
    date: str,
    notes: str | None,
):
    """Add an income or expense transaction.

    Examples:
        cashpilot add --type expense --amount 50 --category Food
        cashpilot add --type income --amount 1000 --category Salary --account "Main Wallet"
    """
    service = ctx.obj["service"]
    state = service.state

    if account is not None:
        account_id = resolve_account_or_exit(ctx, state, account)
    elif state.accounts:
        account_id = state.accounts[0].id
    else:
        click.echo("Error: No accounts found. Create one with 'account add'.", err=True)
        ctx.exit(1)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        draft = TransactionDraft(
            amount=txn_amount,
            type=TransactionType(txn_type.upper()),
            category=category,
            date=txn_date,
            account_id=account_id,
            notes=notes,
        )
        txn = service.add_transaction(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    account_obj = service.state.get_account(account_id)
    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Account: {account_obj.name}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  {txn.type.value.title()}: {format_money(txn.amount, account_obj.currency)}")
    click.echo(f"  Category: {txn.category}")
    click.echo(f"  New balance: {format_money(account_obj.balance, account_obj.currency)}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
