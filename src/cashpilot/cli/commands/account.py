"""Account management commands."""

import click
from cashpilot.cli.display import format_money
from cashpilot.cli.error_handling import handle_domain_error
from cashpilot.cli.resolution import resolve_account_or_exit
from cashpilot.domain.errors import DomainError


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("add")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--currency", help="Currency code (defaults to the ledger currency)")
@click.pass_context
def add_account(ctx, name: str, currency: str | None):
    """Create a new account with a zero balance.

    Examples:
        cashpilot account add "Savings"
        cashpilot account add "Travel Card" --currency EUR
    """
    service = ctx.obj["service"]
    currency = currency or service.state.settings.currency

    try:
        account = service.add_account(name=name, currency=currency)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{account.name}' (ID: {account.id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their balances."""
    state = ctx.obj["service"].state

    if not state.accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for position, acc in enumerate(state.accounts, start=1):
        click.echo(
            f"#{position:<3d} {acc.name:20s} | {format_money(acc.balance, acc.currency):>18s} | ID: {acc.id}"
        )


@account_group.command("remove")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def remove_account(ctx, account: str, yes: bool) -> None:
    """Remove an account.

    ACCOUNT can be an account name, list position (#) or ID.

    The account can only be removed if no transaction references it. Delete
    or move its transactions first.

    Examples:
        cashpilot account remove "Savings"
        cashpilot account remove 2
    """
    service = ctx.obj["service"]
    account_id = resolve_account_or_exit(ctx, service.state, account)
    account_obj = service.state.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to remove account '{account_obj.name}'?"
    ):
        click.echo("Removal cancelled.")
        return

    try:
        service.remove_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed account '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
