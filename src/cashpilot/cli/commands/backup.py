"""Export and import commands."""

import click
from cashpilot.cli.error_handling import handle_domain_error
from cashpilot.domain.backup import BackupService, default_export_name
from cashpilot.domain.errors import DomainError, StorageError


@click.command("export")
@click.argument("kind", type=click.Choice(["json", "csv"], case_sensitive=False), default="json")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.pass_context
def export_ledger(ctx, kind: str, output: str | None):
    """Export the ledger as a JSON backup or the transactions as CSV.

    Examples:
        cashpilot export json
        cashpilot export csv -o transactions.csv
    """
    service = ctx.obj["service"]
    kind = kind.lower()
    path = output or default_export_name(kind)

    try:
        written = BackupService(ctx.obj["store"]).export_file(service.state, path, kind=kind)
    except OSError as e:
        click.echo(f"Error: Could not write {path}: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported {kind.upper()} to {written}")


@click.command("import")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_ledger(ctx, backup_file: str, yes: bool):
    """Replace all data with a JSON backup.

    Existing accounts, transactions, loans and settings are overwritten, not
    merged.
    """
    if not yes and not click.confirm("This will overwrite all existing data. Continue?"):
        click.echo("Import cancelled.")
        return

    try:
        state = BackupService(ctx.obj["store"]).import_file(backup_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except (StorageError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    ctx.obj["service"].refresh()
    click.echo("\nImport complete:")
    click.echo(f"  Accounts: {len(state.accounts)}")
    click.echo(f"  Transactions: {len(state.transactions)}")
    click.echo(f"  Loans: {len(state.loans)}")


def register_commands(cli):
    """Register export and import commands with main CLI."""
    cli.add_command(export_ledger)
    cli.add_command(import_ledger)
