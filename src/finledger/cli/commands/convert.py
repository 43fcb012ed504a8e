"""Currency conversion command."""

import click

from finledger.cli.error_handling import handle_domain_error
from finledger.domain.errors import DomainError
from finledger.utils.amount_parser import parse_amount


@click.command("convert")
@click.argument("amount")
@click.argument("from_code")
@click.argument("to_code")
@click.pass_context
def convert_amount(ctx, amount: str, from_code: str, to_code: str):
    """Convert an amount between currencies using cached exchange rates.

    Examples:
        finledger convert 100 USD EUR
    """
    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        converted = ctx.obj["rates"].convert(value, from_code, to_code)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{value:,.2f} {from_code.upper()} = {converted:,.2f} {to_code.upper()}")


def register_commands(cli):
    """Register convert command with main CLI."""
    cli.add_command(convert_amount)
