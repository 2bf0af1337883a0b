"""Advice command."""

import click
from cashpilot.domain.advice import AdviceService


@click.command("advice")
@click.option("--model", help="Model name (overrides CASHPILOT_ADVICE_MODEL)")
@click.pass_context
def advice(ctx, model: str | None):
    """Ask an AI model for insights on your finances.

    Requires OPENAI_API_KEY. Only a summary of balances, the 20 most recent
    transactions and active loans is sent.
    """
    service = ctx.obj["service"]
    click.echo(AdviceService(model=model).generate_advice(service.state))


def register_commands(cli):
    """Register advice command with main CLI."""
    cli.add_command(advice)
