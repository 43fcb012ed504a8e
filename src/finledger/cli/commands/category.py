"""Category management commands."""

import click

from finledger.cli.error_handling import handle_domain_error
from finledger.cli.user_resolution import resolve_user_or_exit
from finledger.domain.aggregation import DEFAULT_EXPENSE_CATEGORIES
from finledger.domain.errors import DomainError, entity_not_found


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List your categories."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    categories = store.list_categories(user_id)
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        click.echo(f"  {cat.name} (ID: {cat.id})")


@category_group.command("add")
@click.argument("name")
@click.pass_context
def add_category(ctx, name: str):
    """Create a new category."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    try:
        created = store.create_category(user_id, {"name": name})
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created category '{created.name}' (ID: {created.id})")


@category_group.command("init")
@click.pass_context
def init_categories(ctx):
    """Create the default expense categories you do not have yet."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    existing = {cat.name for cat in store.list_categories(user_id)}
    created = 0
    for name in DEFAULT_EXPENSE_CATEGORIES:
        if name in existing:
            continue
        store.create_category(user_id, {"name": name})
        created += 1

    click.echo(f"Created {created} categories ({len(existing)} already existed).")


@category_group.command("delete")
@click.argument("category_id", type=int)
@click.pass_context
def delete_category(ctx, category_id: int):
    """Delete one of your categories."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    if not store.delete_category(user_id, category_id):
        click.echo(f"Error: {entity_not_found('category', category_id)}", err=True)
        ctx.exit(1)
    click.echo(f"Deleted category {category_id}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
