"""Budget commands."""

from datetime import date

import click

from finledger.cli.error_handling import handle_domain_error
from finledger.cli.user_resolution import resolve_user_or_exit
from finledger.domain.errors import DomainError
from finledger.domain.reports import ReportService


def _resolve_period(month: int | None, year: int | None) -> tuple[int, int]:
    """Default missing month/year to the current ones."""
    today = date.today()
    return (month or today.month, year or today.year)


@click.group()
def budget_group():
    """Set budgets and compare them with spending."""
    pass


@budget_group.command("set")
@click.argument("category")
@click.option("--amount", required=True, help="Budget amount for the month")
@click.option("--month", type=click.IntRange(1, 12), help="Month (default: current month)")
@click.option("--year", type=int, help="Year (default: current year)")
@click.pass_context
def set_budget(ctx, category: str, amount: str, month: int | None, year: int | None):
    """Set the budget for a category in one month."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)
    month, year = _resolve_period(month, year)

    try:
        created = store.create_budget(
            user_id, {"category": category, "amount": amount, "month": month, "year": year}
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Set budget for '{created.category}' in {created.year}-{created.month:02d}: "
        f"${created.amount:,.2f} (ID: {created.id})"
    )


@budget_group.command("list")
@click.option("--month", type=click.IntRange(1, 12), help="Month (default: current month)")
@click.option("--year", type=int, help="Year (default: current year)")
@click.pass_context
def list_budgets(ctx, month: int | None, year: int | None):
    """List budgets for one month."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)
    month, year = _resolve_period(month, year)

    budgets = store.list_budgets_for_period(user_id, month, year)
    if not budgets:
        click.echo(f"No budgets found for {year}-{month:02d}.")
        return

    for bud in budgets:
        click.echo(f"  {bud.category}: ${bud.amount:,.2f} (ID: {bud.id})")


@budget_group.command("report")
@click.option("--month", type=click.IntRange(1, 12), help="Month (default: current month)")
@click.option("--year", type=int, help="Year (default: current year)")
@click.pass_context
def budget_report(ctx, month: int | None, year: int | None):
    """Compare spending with budgets per category."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)
    month, year = _resolve_period(month, year)

    rows, totals = ReportService(store).budget_report(user_id, month, year)

    click.echo(f"\nBudget report for {year}-{month:02d}")
    click.echo(f"{'Category':<18} {'Spent':>12} {'Budget':>12} {'Left':>12}")
    click.echo("-" * 57)
    for row in rows:
        click.echo(
            f"{row.category[:18]:<18} {f'${row.total_expenses:,.2f}':>12} "
            f"{f'${row.budget:,.2f}':>12} {f'${row.remaining:,.2f}':>12}"
        )
    click.echo("-" * 57)
    click.echo(
        f"{'Total':<18} {f'${totals.total_expenses:,.2f}':>12} {f'${totals.total_budget:,.2f}':>12}"
    )


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
