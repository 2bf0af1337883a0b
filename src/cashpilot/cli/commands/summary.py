"""Summary commands."""

import click
from cashpilot.cli.display import format_money
from cashpilot.domain.summary import build_dashboard, expenses_by_category, monthly_totals
from cashpilot.utils.date_parser import PERIODS, parse_date


@click.group()
def summary_group():
    """Reports over the ledger."""
    pass


@summary_group.command("dashboard")
@click.option(
    "--period",
    type=click.Choice(list(PERIODS) + ["custom"], case_sensitive=False),
    default="all",
    show_default=True,
    help="Period for income and expense totals",
)
@click.option("--start-date", help="Start date for --period custom")
@click.option("--end-date", help="End date for --period custom")
@click.pass_context
def dashboard(ctx, period: str, start_date: str | None, end_date: str | None):
    """Show balances, period totals and loans needing attention."""
    state = ctx.obj["service"].state

    try:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    report = build_dashboard(state, period=period, start_date=start, end_date=end)
    currency = report.currency

    click.echo(f"\nTotal balance: {format_money(report.total_balance, currency)}")
    click.echo(f"Income:        {format_money(report.income, currency)}")
    click.echo(f"Expenses:      {format_money(report.expense, currency)}")
    click.echo(f"Net:           {format_money(report.net, currency)}")
    click.echo(f"Active loans:  {len(report.active_loans)}")

    if report.overdue_loans:
        click.echo("\nAttention: Overdue Loans Detected")
        for loan in report.overdue_loans:
            click.echo(
                f"  {loan.counterparty} - {format_money(loan.principal, currency)} (Due: {loan.due_date})"
            )


@summary_group.command("monthly")
@click.pass_context
def monthly(ctx):
    """Income vs expense per month."""
    state = ctx.obj["service"].state
    currency = state.settings.currency
    rows = monthly_totals(state)
    if not rows:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'Month':<10} {'Income':>18} {'Expense':>18}")
    click.echo("-" * 48)
    for row in rows:
        click.echo(
            f"{row.month:<10} {format_money(row.income, currency):>18} "
            f"{format_money(row.expense, currency):>18}"
        )


@summary_group.command("categories")
@click.pass_context
def categories(ctx):
    """Expenses by category, largest first."""
    state = ctx.obj["service"].state
    currency = state.settings.currency
    totals = expenses_by_category(state)
    if not totals:
        click.echo("No expenses found.")
        return

    grand_total = sum(totals.values())
    click.echo(f"\n{'Category':<24} {'Amount':>18} {'Share':>7}")
    click.echo("-" * 51)
    for name, amount in totals.items():
        share = amount / grand_total * 100 if grand_total else 0
        click.echo(f"{name[:24]:<24} {format_money(amount, currency):>18} {share:>6.1f}%")


def register_commands(cli):
    """Register summary commands with main CLI."""
    cli.add_command(summary_group, name="summary")
