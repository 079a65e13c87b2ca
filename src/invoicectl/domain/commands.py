"""MutationCommand — the canonical form of a requested invoice write.

A command is built per request from validated input and consumed
immediately by the invoice service. It is never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass

from invoicectl.domain.types import MutationKind
from invoicectl.domain.validation import InvoiceFields


@dataclass(frozen=True)
class MutationCommand:
    """One create, update, or delete against the invoices table.

    Attributes:
        kind: Which write to perform.
        target_id: Row to update or delete. Unused for create.
        fields: Validated field set. Unused for delete.
    """

    kind: MutationKind
    target_id: str | None = None
    fields: InvoiceFields | None = None

    @classmethod
    def create(cls, fields: InvoiceFields) -> MutationCommand:
        return cls(kind=MutationKind.CREATE, fields=fields)

    @classmethod
    def update(cls, target_id: str, fields: InvoiceFields) -> MutationCommand:
        return cls(kind=MutationKind.UPDATE, target_id=target_id, fields=fields)

    @classmethod
    def delete(cls, target_id: str) -> MutationCommand:
        return cls(kind=MutationKind.DELETE, target_id=target_id)

    def problems(self) -> list[str]:
        """Return reasons this command cannot be executed (empty if runnable)."""
        problems: list[str] = []
        if self.kind in (MutationKind.CREATE, MutationKind.UPDATE) and self.fields is None:
            problems.append(f"{self.kind} command requires a validated field set")
        if self.kind in (MutationKind.UPDATE, MutationKind.DELETE) and self.target_id is None:
            problems.append(f"{self.kind} command requires a target id")
        return problems
