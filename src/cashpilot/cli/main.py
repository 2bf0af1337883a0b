"""Main CLI entry point."""

import click
from cashpilot.database.factories import create_sqlite_store
from cashpilot.domain.errors import StorageError
from cashpilot.domain.ledger_service import LedgerService
from cashpilot.logging_setup import configure_logging

# Import and register all commands at module level
from cashpilot.cli.commands import (
    account,
    add,
    transaction,
    loan,
    category,
    settings,
    summary,
    backup,
    advice,
    pin,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CASHPILOT_DB_PATH environment variable)",
    envvar="CASHPILOT_DB_PATH",
)
@click.option(
    "--pin",
    "pin_code",
    help="PIN for a protected ledger (prompted for when needed)",
    envvar="CASHPILOT_PIN",
)
@click.option(
    "--log-level",
    help="Logging level, e.g. DEBUG or WARNING (default: CASHPILOT_LOG_LEVEL or INFO)",
    envvar="CASHPILOT_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, pin_code: str | None, log_level: str | None):
    """Cash Pilot - Personal finance tracker.

    Track accounts, income and expenses, and money lent or borrowed, with
    balances and loan status kept consistent on every change.
    """
    ctx.ensure_object(dict)

    # Open the ledger only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is None:
        return

    configure_logging(log_level)
    try:
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        store.initialize_schema()
        ctx.call_on_close(store.disconnect)

        service = LedgerService(store)
        if not service.open():
            if pin_code is None:
                pin_code = click.prompt("PIN", hide_input=True)
            if not service.login(pin_code):
                click.echo("Error: Incorrect PIN", err=True)
                ctx.exit(1)
    except StorageError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    ctx.obj["store"] = store
    ctx.obj["service"] = service


# Register all commands
account.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
loan.register_commands(cli)
category.register_commands(cli)
settings.register_commands(cli)
summary.register_commands(cli)
backup.register_commands(cli)
advice.register_commands(cli)
pin.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
