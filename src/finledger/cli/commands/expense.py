"""Expense commands."""

import click

from finledger.cli.error_handling import handle_domain_error
from finledger.cli.user_resolution import resolve_user_or_exit
from finledger.domain.errors import DomainError, entity_not_found


@click.group()
def expense_group():
    """Record and list expenses."""
    pass


@expense_group.command("add")
@click.argument("description")
@click.option("--amount", required=True, help="Expense amount (e.g., 42.50)")
@click.option("--category", required=True, help="Expense category (e.g., Food)")
@click.option(
    "--date",
    "expense_date",
    default="today",
    show_default=True,
    help="Expense date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.pass_context
def add_expense(ctx, description: str, amount: str, category: str, expense_date: str):
    """Record an expense.

    Examples:
        finledger --user alice expense add "Groceries" --amount 42.50 --category Food
        finledger --user alice expense add "Bus pass" --amount 60 --category Transportation --date 2024-03-01
    """
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    try:
        created = store.create_expense(
            user_id,
            {
                "description": description,
                "amount": amount,
                "category": category,
                "date": expense_date,
            },
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created expense {created.id}")
    click.echo(f"  Date: {created.date}")
    click.echo(f"  Amount: ${created.amount:,.2f}")
    click.echo(f"  Category: {created.category}")


@expense_group.command("list")
@click.pass_context
def list_expenses(ctx):
    """List your expenses."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    expenses = store.list_expenses(user_id)
    if not expenses:
        click.echo("No expenses found.")
        return

    click.echo(f"{'ID':<6} {'Date':<12} {'Category':<16} {'Amount':>12}  Description")
    click.echo("-" * 70)
    for exp in expenses:
        click.echo(
            f"{exp.id:<6} {str(exp.date):<12} {exp.category[:16]:<16} "
            f"{f'${exp.amount:,.2f}':>12}  {exp.description}"
        )


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.pass_context
def delete_expense(ctx, expense_id: int):
    """Delete one of your expenses."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    if not store.delete_expense(user_id, expense_id):
        click.echo(f"Error: {entity_not_found('expense', expense_id)}", err=True)
        ctx.exit(1)
    click.echo(f"Deleted expense {expense_id}")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
