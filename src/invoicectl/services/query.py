"""QueryService — read side of the invoice listing.

The unfiltered listing is served through the listing cache, keyed by
the configured listing path, so it reflects exactly the writes that
have been followed by a ``revalidate_path`` signal.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select

from invoicectl.domain.money import format_cents
from invoicectl.domain.types import InvoiceStatus
from invoicectl.infrastructure.database.schema import customers, invoices
from invoicectl.services.base import BaseService
from invoicectl.services.result import NOT_FOUND, ServiceError, ServiceResult
from invoicectl.services.telemetry import stage, traced


def _row_to_item(row: Any) -> dict[str, Any]:
    return {
        "id": row.id,
        "customer_id": row.customer_id,
        "name": row.name,
        "email": row.email,
        "amount": row.amount,
        "amount_display": format_cents(row.amount),
        "status": row.status,
        "date": row.date,
    }


class QueryService(BaseService):
    """Read-only invoice lookups."""

    @traced
    def list_invoices(self, *, status: str | None = None) -> ServiceResult:
        """List invoices with customer name and email, newest first.

        With *status* set, bypasses the cache and filters by status.
        """
        op = "list_invoices"
        if status is not None and status not in [s.value for s in InvoiceStatus]:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code="INVALID_FILTER", message=f"Unknown status: {status!r}"),
            )

        if status is not None:
            with stage("query"):
                items = self._fetch(status)
            return ServiceResult(
                ok=True, op=op, data={"items": items, "count": len(items), "cached": False}
            )

        path = self._store.settings.listing_path
        with stage("query"):
            items, hit = self._store.listing_cache.get_or_compute(path, self._fetch)
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": items, "count": len(items), "cached": hit},
        )

    @traced
    def get_invoice(self, invoice_id: str) -> ServiceResult:
        """Fetch one invoice by id."""
        op = "get_invoice"
        with self._store.engine.connect() as conn:
            row = conn.execute(self._base_query().where(invoices.c.id == invoice_id)).first()
        if row is None:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=NOT_FOUND, message=f"Invoice not found: {invoice_id}"),
            )
        return ServiceResult(ok=True, op=op, data=_row_to_item(row))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _base_query() -> Any:
        return select(
            invoices.c.id,
            invoices.c.customer_id,
            invoices.c.amount,
            invoices.c.status,
            invoices.c.date,
            customers.c.name,
            customers.c.email,
        ).join(customers, invoices.c.customer_id == customers.c.id)

    def _fetch(self, status: str | None = None) -> list[dict[str, Any]]:
        stmt = self._base_query()
        if status is not None:
            stmt = stmt.where(invoices.c.status == status)
        stmt = stmt.order_by(invoices.c.date.desc(), invoices.c.id)
        with self._store.engine.connect() as conn:
            return [_row_to_item(row) for row in conn.execute(stmt)]
