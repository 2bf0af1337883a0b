"""Category management commands."""

import click
from cashpilot.cli.error_handling import handle_domain_error
from cashpilot.domain.entities import CategoryKind
from cashpilot.domain.errors import DomainError

KIND_CHOICE = click.Choice([k.value for k in CategoryKind], case_sensitive=False)


@click.group()
def category_group():
    """Manage income and expense categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List income and expense categories."""
    categories = ctx.obj["service"].state.settings.categories

    for kind in CategoryKind:
        names = categories.for_kind(kind)
        click.echo(f"\n{kind.value.title()} categories:")
        if not names:
            click.echo("  (none)")
        for name in names:
            click.echo(f"  {name}")


@category_group.command("add")
@click.argument("kind", type=KIND_CHOICE)
@click.argument("name")
@click.pass_context
def add_category(ctx, kind: str, name: str):
    """Add a category, e.g. 'category add expense Pets'."""
    try:
        ctx.obj["service"].add_category(CategoryKind(kind.lower()), name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added {kind.lower()} category '{name.strip()}'")


@category_group.command("remove")
@click.argument("kind", type=KIND_CHOICE)
@click.argument("name")
@click.pass_context
def remove_category(ctx, kind: str, name: str):
    """Remove a category. Existing transactions keep their category text."""
    service = ctx.obj["service"]
    category_kind = CategoryKind(kind.lower())
    if name not in service.state.settings.categories.for_kind(category_kind):
        click.echo(f"Error: Category '{name}' not found", err=True)
        ctx.exit(1)

    service.remove_category(category_kind, name)
    click.echo(f"Removed {category_kind.value} category '{name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
