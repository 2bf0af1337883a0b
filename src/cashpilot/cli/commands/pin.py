"""PIN protection commands."""

import click
from cashpilot.cli.error_handling import handle_domain_error
from cashpilot.domain.errors import DomainError, StorageError


@click.group()
def pin_group():
    """Protect the ledger with a PIN."""
    pass


@pin_group.command("set")
@click.option(
    "--new-pin",
    prompt="New PIN",
    hide_input=True,
    confirmation_prompt=True,
    help="The new PIN",
)
@click.pass_context
def set_pin(ctx, new_pin: str):
    """Set or change the PIN."""
    try:
        ctx.obj["service"].set_pin(new_pin)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    click.echo("PIN set")


@pin_group.command("remove")
@click.pass_context
def remove_pin(ctx):
    """Remove PIN protection."""
    service = ctx.obj["service"]
    if not service.has_pin:
        click.echo("No PIN is set.")
        return
    try:
        service.remove_pin()
    except StorageError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    click.echo("PIN removed")


def register_commands(cli):
    """Register PIN commands with main CLI."""
    cli.add_command(pin_group, name="pin")
