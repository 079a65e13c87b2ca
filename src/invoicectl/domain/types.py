"""Invoice classification enums."""

from __future__ import annotations

from enum import StrEnum


class InvoiceStatus(StrEnum):
    """Lifecycle status of an invoice. Exactly two members."""

    PENDING = "pending"
    PAID = "paid"


class MutationKind(StrEnum):
    """The three write operations the pipeline executes."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
