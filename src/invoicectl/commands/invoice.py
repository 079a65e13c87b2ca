"""Command group: invoice mutations and listing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from invoicectl.commands._base import InvoiceGroup
from invoicectl.domain.validation import AMOUNT, CUSTOMER_ID, STATUS

if TYPE_CHECKING:
    from invoicectl.commands._context import AppContext


def _form(customer_id: str | None, amount: str | None, status: str | None) -> dict[str, Any]:
    """Build the raw form map the invoice pipeline validates.

    Options are passed through unvalidated; missing options stay None so
    the pipeline reports them as field errors.
    """
    return {CUSTOMER_ID: customer_id, AMOUNT: amount, STATUS: status}


_INVOICE_EXAMPLES = """\
  invoicectl invoice create --customer-id 3958dc9e --amount 10.50 --status paid
  invoicectl invoice update 6f1c2a0e --customer-id 3958dc9e --amount 99 --status pending
  invoicectl invoice delete 6f1c2a0e
  invoicectl invoice list --status pending"""


@click.group(cls=InvoiceGroup, examples=_INVOICE_EXAMPLES)
@click.pass_obj
def invoice(app: AppContext) -> None:
    """Create, update, delete, and list invoices."""


@invoice.command(
    examples="""\
  invoicectl invoice create --customer-id 3958dc9e --amount 10.50 --status paid
  invoicectl --json invoice create --customer-id 3958dc9e --amount 250 --status pending"""
)
@click.option("--customer-id", default=None, help="Customer the invoice is billed to.")
@click.option("--amount", default=None, help="Amount in dollars, e.g. 10.50.")
@click.option("--status", default=None, help="pending or paid.")
@click.pass_obj
def create(
    app: AppContext,
    customer_id: str | None,
    amount: str | None,
    status: str | None,
) -> None:
    """Create an invoice dated today."""
    from invoicectl.services.invoice import InvoiceService

    app.emit(InvoiceService(app.store).create_invoice(_form(customer_id, amount, status)))


@invoice.command(
    examples="""\
  invoicectl invoice update 6f1c2a0e --customer-id 3958dc9e --amount 99 --status paid"""
)
@click.argument("invoice_id")
@click.option("--customer-id", default=None, help="Customer the invoice is billed to.")
@click.option("--amount", default=None, help="Amount in dollars, e.g. 10.50.")
@click.option("--status", default=None, help="pending or paid.")
@click.pass_obj
def update(
    app: AppContext,
    invoice_id: str,
    customer_id: str | None,
    amount: str | None,
    status: str | None,
) -> None:
    """Replace an invoice's customer, amount, and status."""
    from invoicectl.services.invoice import InvoiceService

    app.emit(
        InvoiceService(app.store).update_invoice(invoice_id, _form(customer_id, amount, status))
    )


@invoice.command(examples="  invoicectl invoice delete 6f1c2a0e")
@click.argument("invoice_id")
@click.pass_obj
def delete(app: AppContext, invoice_id: str) -> None:
    """Delete an invoice. Always succeeds; failures are logged."""
    from invoicectl.services.invoice import InvoiceService

    app.emit(InvoiceService(app.store).delete_invoice(invoice_id))


@invoice.command(
    "list",
    examples="""\
  invoicectl invoice list
  invoicectl invoice list --status paid""",
)
@click.option(
    "--status",
    type=click.Choice(["pending", "paid"]),
    default=None,
    help="Only invoices with this status.",
)
@click.pass_obj
def list_cmd(app: AppContext, status: str | None) -> None:
    """List invoices, newest first."""
    from invoicectl.services.query import QueryService

    app.emit(QueryService(app.store).list_invoices(status=status))


@invoice.command(examples="  invoicectl invoice show 6f1c2a0e")
@click.argument("invoice_id")
@click.pass_obj
def show(app: AppContext, invoice_id: str) -> None:
    """Show one invoice."""
    from invoicectl.services.query import QueryService

    app.emit(QueryService(app.store).get_invoice(invoice_id))
