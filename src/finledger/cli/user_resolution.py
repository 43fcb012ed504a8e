"""CLI helpers for resolving the acting user."""

from __future__ import annotations

import click

from finledger.utils.user_resolver import resolve_user


def resolve_user_or_exit(ctx: click.Context) -> int:
    """Resolve the --user option to a user ID, or exit with a CLI error.

    Every user-scoped command goes through here so the error message and
    exit status stay consistent.
    """
    user = ctx.obj.get("user")
    if user is None:
        click.echo("Error: No user selected. Pass --user or set FINLEDGER_USER.", err=True)
        ctx.exit(1)
    try:
        return resolve_user(ctx.obj["store"], user)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
