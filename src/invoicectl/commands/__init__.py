"""Subcommand modules for invoicectl.

Provides register_commands() which uses deferred imports to keep
``invoicectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from invoicectl.commands.customer import customer
    from invoicectl.commands.invoice import invoice

    cli.add_command(invoice)
    cli.add_command(customer)
