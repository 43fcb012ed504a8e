"""Spending tip commands."""

import click

from finledger.cli.error_handling import handle_domain_error
from finledger.domain.entities import TipType
from finledger.domain.errors import DomainError

TIP_TYPES = [t.value for t in TipType]


@click.group()
def tip_group():
    """Store and show spending tips."""
    pass


@tip_group.command("add")
@click.argument("tip_type", type=click.Choice(TIP_TYPES, case_sensitive=False))
@click.argument("message")
@click.pass_context
def add_tip(ctx, tip_type: str, message: str):
    """Store a tip of the given type."""
    store = ctx.obj["store"]

    try:
        created = store.create_tip({"type": tip_type.lower(), "message": message})
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {created.type.value} tip (ID: {created.id})")


@tip_group.command("show")
@click.argument("tip_type", type=click.Choice(TIP_TYPES, case_sensitive=False))
@click.pass_context
def show_tip(ctx, tip_type: str):
    """Show the latest tip of the given type."""
    store = ctx.obj["store"]

    latest = store.get_latest_tip(TipType(tip_type.lower()))
    if latest is None:
        click.echo(f"No {tip_type.lower()} tips yet.")
        return
    click.echo(latest.message)


def register_commands(cli):
    """Register tip commands with main CLI."""
    cli.add_command(tip_group, name="tip")
