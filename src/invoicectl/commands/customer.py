"""Command group: customers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from invoicectl.commands._base import InvoiceGroup

if TYPE_CHECKING:
    from invoicectl.commands._context import AppContext


@click.group(
    cls=InvoiceGroup,
    examples="""\
  invoicectl customer add "Delba de Oliveira" --email delba@oliveira.com
  invoicectl customer list""",
)
@click.pass_obj
def customer(app: AppContext) -> None:
    """Add and list customers."""


@customer.command()
@click.argument("name")
@click.option("--email", required=True, help="Customer email (unique).")
@click.option("--image-url", default=None, help="Avatar image URL.")
@click.pass_obj
def add(app: AppContext, name: str, email: str, image_url: str | None) -> None:
    """Add a customer."""
    from invoicectl.services.customer import CustomerService

    app.emit(CustomerService(app.store).add_customer(name, email, image_url=image_url))


@customer.command("list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List customers by name."""
    from invoicectl.services.customer import CustomerService

    app.emit(CustomerService(app.store).list_customers())
