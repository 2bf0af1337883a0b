"""Loan management commands."""

from datetime import date as date_type

import click
from cashpilot.cli.display import format_money
from cashpilot.cli.error_handling import handle_domain_error
from cashpilot.cli.resolution import resolve_account_or_exit, resolve_loan_or_exit
from cashpilot.domain.entities import LoanDraft, LoanStatus, LoanType, RepaymentDraft
from cashpilot.domain.errors import DomainError
from cashpilot.domain.loan_status import (
    is_overdue,
    remaining,
    repayment_progress,
    total_due,
    total_repaid,
)
from cashpilot.utils.amount_parser import parse_amount, parse_rate
from cashpilot.utils.date_parser import parse_date


def _parse_date_or_exit(ctx: click.Context, value: str, label: str) -> date_type:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def loan_group():
    """Manage money lent and borrowed."""
    pass


@loan_group.command("add")
@click.option(
    "--type",
    "loan_type",
    type=click.Choice(["given", "taken"], case_sensitive=False),
    required=True,
    help="given = you lent money, taken = you borrowed money",
)
@click.option("--counterparty", required=True, help="Who the loan is with")
@click.option("--principal", required=True, help="Amount lent or borrowed")
@click.option("--rate", default="0", show_default=True, help="Simple interest rate in percent")
@click.option("--start-date", default="today", show_default=True, help="Start date")
@click.option("--due-date", required=True, help="Due date")
@click.option("--notes", help="Notes")
@click.pass_context
def add_loan(
    ctx,
    loan_type: str,
    counterparty: str,
    principal: str,
    rate: str,
    start_date: str,
    due_date: str,
    notes: str | None,
):
    """Record a new loan.

    The principal is booked on the first account: an expense when you lend,
    income when you borrow.

    Examples:
        cashpilot loan add --type given --counterparty Alice --principal 500 --rate 10 --due-date 2025-06-30
    """
    service = ctx.obj["service"]

    try:
        principal_amount = parse_amount(principal)
        interest_rate = parse_rate(rate)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    start = _parse_date_or_exit(ctx, start_date, "start date")
    due = _parse_date_or_exit(ctx, due_date, "due date")

    try:
        loan = service.add_loan(
            LoanDraft(
                type=LoanType(loan_type.upper()),
                counterparty=counterparty,
                principal=principal_amount,
                interest_rate=interest_rate,
                start_date=start,
                due_date=due,
                notes=notes,
            )
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    currency = service.state.settings.currency
    click.echo(f"Created loan {loan.id}")
    click.echo(f"  {loan.type.value} with {loan.counterparty}")
    click.echo(f"  Principal: {format_money(loan.principal, currency)}")
    click.echo(f"  Total due: {format_money(total_due(loan), currency)}")


@loan_group.command("list")
@click.option("--active", is_flag=True, help="Show only active loans")
@click.pass_context
def list_loans(ctx, active: bool):
    """List loans with repayment progress."""
    state = ctx.obj["service"].state
    currency = state.settings.currency
    today = date_type.today()

    loans = [l for l in state.loans if not active or l.status is LoanStatus.ACTIVE]
    if not loans:
        click.echo("No loans found.")
        return

    click.echo("\nLoans:")
    click.echo("-" * 80)
    for loan in loans:
        status = "OVERDUE" if is_overdue(loan, today) else loan.status.value
        click.echo(f"{loan.id}  [{status}]  {loan.type.value} - {loan.counterparty}")
        click.echo(
            f"  Repaid {format_money(total_repaid(state.transactions, loan), currency)}"
            f" of {format_money(total_due(loan), currency)}"
            f" ({repayment_progress(state, loan):.0f}%),"
            f" remaining {format_money(remaining(state, loan), currency)}"
        )
        click.echo(f"  Started {loan.start_date}, due {loan.due_date}")
        if loan.notes:
            click.echo(f"  Notes: {loan.notes}")


@loan_group.command("repay")
@click.argument("loan_ref", metavar="LOAN_ID")
@click.option("--amount", required=True, help="Repayment amount")
@click.option("--account", help="Account name, position or ID (defaults to the first account)")
@click.option("--date", default="today", show_default=True, help="Repayment date")
@click.option("--notes", help="Notes")
@click.pass_context
def repay_loan(ctx, loan_ref: str, amount: str, account: str | None, date: str, notes: str | None):
    """Record a repayment on a loan.

    Repayments of money you lent are income; repayments of money you
    borrowed are expenses.
    """
    service = ctx.obj["service"]
    state = service.state
    loan_id = resolve_loan_or_exit(ctx, state, loan_ref)

    if account is not None:
        account_id = resolve_account_or_exit(ctx, state, account)
    elif state.accounts:
        account_id = state.accounts[0].id
    else:
        click.echo("Error: No accounts found. Create one with 'account add'.", err=True)
        ctx.exit(1)

    try:
        repayment_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)
    repayment_date = _parse_date_or_exit(ctx, date, "date")

    try:
        txn = service.add_repayment(
            loan_id,
            RepaymentDraft(
                amount=repayment_amount,
                account_id=account_id,
                date=repayment_date,
                notes=notes,
            ),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    loan = service.state.get_loan(loan_id)
    click.echo(f"Recorded repayment {txn.id} ({txn.type.value})")
    click.echo(f"  Loan status: {loan.status.value}")


@loan_group.command("delete")
@click.argument("loan_ref", metavar="LOAN_ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_loan(ctx, loan_ref: str, yes: bool):
    """Delete a loan together with its principal and repayment transactions."""
    service = ctx.obj["service"]
    loan_id = resolve_loan_or_exit(ctx, service.state, loan_ref)
    linked = sum(1 for t in service.state.transactions if t.related_loan_id == loan_id)

    if not yes and not click.confirm(
        f"Delete loan {loan_id} and its {linked} transaction(s)?"
    ):
        click.echo("Deletion cancelled.")
        return

    service.delete_loan(loan_id)
    click.echo(f"Deleted loan {loan_id} and {linked} transaction(s)")


def register_commands(cli):
    """Register loan commands with main CLI."""
    cli.add_command(loan_group, name="loan")
