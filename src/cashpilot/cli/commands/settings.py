"""Settings commands."""

import click
from cashpilot.cli.error_handling import handle_domain_error
from cashpilot.domain.errors import DomainError


@click.group()
def settings_group():
    """View and change settings."""
    pass


@settings_group.command("show")
@click.pass_context
def show_settings(ctx):
    """Show current settings."""
    service = ctx.obj["service"]
    settings = service.state.settings
    click.echo(f"Currency: {settings.currency}")
    click.echo(f"Theme: {'dark' if settings.dark_mode else 'light'}")
    click.echo(f"PIN protection: {'on' if service.has_pin else 'off'}")


@settings_group.command("set")
@click.option("--currency", help="Default currency code (e.g., EUR)")
@click.option("--dark-mode/--light-mode", default=None, help="Theme preference")
@click.pass_context
def set_settings(ctx, currency: str | None, dark_mode: bool | None):
    """Change settings. Only the given options change."""
    changes = {}
    if currency is not None:
        if not currency.strip():
            click.echo("Error: Currency must not be empty", err=True)
            ctx.exit(1)
        changes["currency"] = currency.strip().upper()
    if dark_mode is not None:
        changes["dark_mode"] = dark_mode

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        ctx.obj["service"].update_settings(**changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("Settings updated")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
