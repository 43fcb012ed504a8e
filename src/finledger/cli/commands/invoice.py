"""Invoice commands."""

import click

from finledger.cli.error_handling import handle_domain_error
from finledger.cli.user_resolution import resolve_user_or_exit
from finledger.domain.errors import DomainError, entity_not_found
from finledger.domain.invoice import InvoiceService


@click.group()
def invoice_group():
    """Manage invoices."""
    pass


@invoice_group.command("add")
@click.argument("customer")
@click.option("--description", required=True, help="What the invoice is for")
@click.option("--amount", required=True, help="Invoice amount in USD")
@click.option("--due-date", required=True, help="Due date (YYYY-MM-DD or relative like 'next month')")
@click.option("--status", default="pending", show_default=True, help="Invoice status")
@click.pass_context
def add_invoice(ctx, customer: str, description: str, amount: str, due_date: str, status: str):
    """Create an invoice."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    try:
        created = store.create_invoice(
            user_id,
            {
                "customer_name": customer,
                "description": description,
                "amount": amount,
                "due_date": due_date,
                "status": status,
            },
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created invoice {created.id} for {created.customer_name}: ${created.amount:,.2f}")


@invoice_group.command("list")
@click.pass_context
def list_invoices(ctx):
    """List your invoices."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)

    invoices = store.list_invoices(user_id)
    if not invoices:
        click.echo("No invoices found.")
        return

    for inv in invoices:
        click.echo(
            f"  {inv.id}: {inv.customer_name} ${inv.amount:,.2f} due {inv.due_date} [{inv.status}]"
        )


@invoice_group.command("convert")
@click.argument("invoice_id", type=int)
@click.argument("currency")
@click.pass_context
def convert_invoice(ctx, invoice_id: int, currency: str):
    """Show an invoice amount in another currency."""
    store = ctx.obj["store"]
    user_id = resolve_user_or_exit(ctx)
    service = InvoiceService(store, ctx.obj["rates"])

    try:
        conversion = service.convert_invoice(user_id, invoice_id, currency)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if conversion is None:
        click.echo(f"Error: {entity_not_found('invoice', invoice_id)}", err=True)
        ctx.exit(1)

    click.echo(
        f"Invoice {conversion.invoice_id}: ${conversion.original_amount:,.2f} = "
        f"{conversion.converted_amount:,.2f} {conversion.currency}"
    )


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
