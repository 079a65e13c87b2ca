"""Rich Console factory and theme for invoicectl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

INVOICE_THEME = Theme(
    {
        "inv.ok": "bold green",
        "inv.error": "bold red",
        "inv.warning": "bold yellow",
        "inv.op": "bold cyan",
        "inv.key": "dim",
        "inv.id": "bold blue",
        "inv.redirect": "magenta",
        "inv.status.paid": "green",
        "inv.status.pending": "yellow",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "paid": "inv.status.paid",
    "pending": "inv.status.pending",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=INVOICE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for an invoice status."""
    return _STATUS_STYLES.get(status, "")
