"""Click command and group classes that carry usage examples.

Examples given via ``examples=`` appear at the end of ``--help`` and can
be printed alone with ``--examples``.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    examples: str | None

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(  # type: ignore[attr-defined]
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(self.examples)
        ctx.exit()

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_heading("Examples")
            formatter.write(f"{self.examples}\n")


class InvoiceCommand(_ExamplesMixin, click.Command):
    pass


class InvoiceGroup(_ExamplesMixin, click.Group):
    """Group whose ``@group.command`` subcommands accept ``examples=`` too."""

    command_class = InvoiceCommand
