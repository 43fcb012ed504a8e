"""User management commands."""

import click

from finledger.cli.error_handling import handle_domain_error
from finledger.domain.errors import DomainError


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("username")
@click.option(
    "--password-hash",
    required=True,
    help="Password hash produced by the authentication layer (stored verbatim)",
)
@click.pass_context
def create_user(ctx, username: str, password_hash: str):
    """Create a new user."""
    store = ctx.obj["store"]

    try:
        created = store.create_user(username=username, password=password_hash)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created user '{created.username}' (ID: {created.id})")


@user_group.command("show")
@click.argument("username")
@click.pass_context
def show_user(ctx, username: str):
    """Show a user by username."""
    store = ctx.obj["store"]

    found = store.get_user_by_username(username)
    if found is None:
        click.echo(f"Error: User '{username}' not found", err=True)
        ctx.exit(1)

    click.echo(f"{found.username} (ID: {found.id})")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
