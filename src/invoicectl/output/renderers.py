"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from invoicectl.domain.money import format_cents
from invoicectl.output.console import create_console, get_output, style_for_status
from invoicectl.services.telemetry import TRACE_META_KEY

if TYPE_CHECKING:
    from rich.console import Console

    from invoicectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(
            str(item["id"]) for item in items if isinstance(item, dict) and "id" in item
        )

    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="inv.ok")
    op = Text(f"  {result.op}", style="inv.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="inv.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="inv.id")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta, including the operation trace (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == TRACE_META_KEY:
            _render_trace(console, value)
        else:
            console.print(Text(f"    {key}: {value}"))


def _duration_style(ms: float) -> str:
    if ms > 1000:
        return "bold red"
    if ms > 100:
        return "yellow"
    return "dim"


def _render_trace(console: Console, trace: dict[str, Any]) -> None:
    """Render an operation trace: one line for the op, one per stage."""
    total = float(trace.get("duration_ms", 0.0))
    console.print(
        Text(f"    {total:>8.2f}ms", style=_duration_style(total)),
        Text(f"  {trace.get('op', '?')}", style="inv.op"),
        sep="",
    )
    for st in trace.get("stages", []):
        ms = float(st.get("duration_ms", 0.0))
        line = Text(f"      {ms:>8.2f}ms", style=_duration_style(ms))
        line.append(f"  {st.get('name', '?')}")
        notes = st.get("notes")
        if notes:
            pairs = ", ".join(f"{k}={v}" for k, v in notes.items())
            line.append(f"  ({pairs})", style="dim")
        console.print(line)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="inv.error")
    op = Text(f"  {result.op}", style="inv.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    for field_name, messages in result.field_errors.items():
        for message in messages:
            console.print(Text(f"  {field_name}: ", style="inv.key"), Text(message))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/update/delete results, including the redirect target."""
    _status_line(console, result)
    for key in ("id", "customer_id", "status", "date", "name", "email"):
        if key in result.data:
            _field(console, key, result.data[key])
    if "amount" in result.data:
        _field(console, "amount", format_cents(int(result.data["amount"])))
    for path in result.revalidated:
        _field(console, "revalidated", path)
    if result.redirect:
        console.print(Text(f"  → {result.redirect}", style="inv.redirect"))
    if verbose:
        _render_meta(console, result)


# ── Query renderers ───────────────────────────────────────────────────


def _render_invoice_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render list_invoices results as a table."""
    items: list[dict[str, Any]] = result.data.get("items", [])
    if not items:
        console.print(Text("No invoices.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="inv.id", no_wrap=True)
    table.add_column("Customer")
    table.add_column("Email", style="dim")
    table.add_column("Amount", justify="right")
    table.add_column("Date")
    table.add_column("Status")

    for item in items:
        status = str(item.get("status", ""))
        table.add_row(
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("email", "")),
            str(item.get("amount_display", "")),
            str(item.get("date", "")),
            Text(status, style=style_for_status(status)),
        )
    console.print(table)
    if verbose:
        _field(console, "cached", result.data.get("cached", False))
        _render_meta(console, result)


def _render_single_invoice(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render get_invoice as key-value fields."""
    _status_line(console, result)
    d = result.data
    for key in ("id", "customer_id", "name", "email", "amount_display", "status", "date"):
        if key in d:
            _field(console, key.replace("_display", ""), d[key])
    if verbose:
        _render_meta(console, result)


def _render_customer_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items: list[dict[str, Any]] = result.data.get("items", [])
    if not items:
        console.print(Text("No customers.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="inv.id", no_wrap=True)
    table.add_column("Name")
    table.add_column("Email", style="dim")
    for item in items:
        table.add_row(str(item["id"]), str(item["name"]), str(item["email"]))
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "create_invoice": _render_mutation,
    "update_invoice": _render_mutation,
    "delete_invoice": _render_mutation,
    "add_customer": _render_mutation,
    "list_invoices": _render_invoice_table,
    "get_invoice": _render_single_invoice,
    "list_customers": _render_customer_table,
}
