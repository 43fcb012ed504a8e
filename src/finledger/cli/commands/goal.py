"""Savings goal commands."""

import click

from finledger.cli.error_handling import handle_domain_error
from finledger.cli.user_resolution import resolve_user_or_exit
from finledger.domain.errors import DomainError, entity_not_found
from finledger.domain.reports import ReportService


def _parse_breakdown(ctx, items: tuple[str, ...]) -> dict[str, str]:
    """Turn repeated LABEL=AMOUNT options into a mapping."""
    breakdown = {}
    for item in items:
        label, sep, amount = item.partition("=")
        if not sep or not label.strip():
            click.echo(f"Error: Invalid breakdown item '{item}', expected LABEL=AMOUNT", err=True)
            ctx.exit(1)
        breakdown[label.strip()] = amount.strip()
    return breakdown


def _echo_goal(goal) -> None:
    click.echo(f"{goal.name} (ID: {goal.id})")
    click.echo(f"  Saved: ${goal.current_amount:,.2f} / ${goal.target_amount:,.2f}")
    click.echo(f"  Deadline: {goal.deadline}")
    for label, amount in goal.breakdown.items():
        click.echo(f"    {label}: ${amount:,.2f}")


@click.group()
def goal_group():
    """Manage savings goals."""
    pass


@goal_group.command("add")
@click.argument("name")
@click.option("--target", required=True, help="Target amount")
@click.option("--deadline", required=True, help="Deadline (YYYY-MM-DD or relative like 'in 6 months')")
@click.option("--current", help="Amount already saved (default: 0)")
@click.option("--item", "items", multiple=True, help="Breakdown entry as LABEL=AMOUNT (repeatable)")
@click.pass_context
def add_goal(ctx, name: str, target: str, deadline: str, current: str | None, items: tuple[str, ...]):
    """Create a savings goal."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    payload = {"name": name, "target_amount": target, "deadline": deadline}
    if current is not None:
        payload["current_amount"] = current
    if items:
        payload["breakdown"] = _parse_breakdown(ctx, items)

    try:
        created = store.create_goal(user_id, payload)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("Created goal:")
    _echo_goal(created)


@goal_group.command("list")
@click.pass_context
def list_goals(ctx):
    """List your savings goals."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    goals = store.list_goals(user_id)
    if not goals:
        click.echo("No goals found.")
        return

    for goal in goals:
        _echo_goal(goal)


@goal_group.command("update")
@click.argument("goal_id", type=int)
@click.option("--name", help="New name")
@click.option("--target", help="New target amount")
@click.option("--current", help="New saved amount")
@click.option("--deadline", help="New deadline")
@click.option("--item", "items", multiple=True, help="Replace breakdown with LABEL=AMOUNT entries")
@click.pass_context
def update_goal(
    ctx,
    goal_id: int,
    name: str | None,
    target: str | None,
    current: str | None,
    deadline: str | None,
    items: tuple[str, ...],
):
    """Update fields of a goal; omitted fields are left unchanged."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    changes = {}
    if name is not None:
        changes["name"] = name
    if target is not None:
        changes["target_amount"] = target
    if current is not None:
        changes["current_amount"] = current
    if deadline is not None:
        changes["deadline"] = deadline
    if items:
        changes["breakdown"] = _parse_breakdown(ctx, items)

    if not changes:
        click.echo("Error: Nothing to update.", err=True)
        ctx.exit(1)

    try:
        updated = store.update_goal(user_id, goal_id, changes)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if updated is None:
        click.echo(f"Error: {entity_not_found('goal', goal_id)}", err=True)
        ctx.exit(1)

    click.echo("Updated goal:")
    _echo_goal(updated)


@goal_group.command("pace")
@click.argument("goal_id", type=int)
@click.pass_context
def goal_pace(ctx, goal_id: int):
    """Show how much to save per month to reach a goal."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    pace = ReportService(store).goal_pace(user_id, goal_id)
    if pace is None:
        click.echo(f"Error: {entity_not_found('goal', goal_id)}", err=True)
        ctx.exit(1)

    click.echo(f"Progress: {pace.progress_percent}%")
    click.echo(f"Months remaining: {pace.months_remaining}")
    click.echo(f"You need to save ${pace.monthly_savings_needed:,.2f} per month to reach your goal.")


def register_commands(cli):
    """Register goal commands with main CLI."""
    cli.add_command(goal_group, name="goal")
