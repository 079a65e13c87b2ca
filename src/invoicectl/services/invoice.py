"""InvoiceService — the validated mutation pipeline.

Pipeline: VALIDATE → COMMAND → PERSIST → REVALIDATE → RESPOND

Each public operation takes raw, untyped form data, validates every
field, builds a :class:`MutationCommand`, and runs exactly one SQL
statement for it. Nothing touches the database until validation has
passed.

Outcomes:

- create/update success: listing path revalidated, ``redirect`` set to
  the listing route. The caller performs the navigation.
- create/update validation failure: field errors, no side effects.
- create/update datastore failure: generic message, no revalidation,
  no redirect. The driver error is logged, never returned.
- delete: always ``ok``. A datastore failure is logged and absorbed,
  and the listing path is revalidated either way.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, insert, update
from sqlalchemy.exc import SQLAlchemyError

from invoicectl.domain.commands import MutationCommand
from invoicectl.domain.ids import generate_id
from invoicectl.domain.types import MutationKind
from invoicectl.domain.validation import ValidationResult, validate_create, validate_update
from invoicectl.infrastructure.database.schema import invoices
from invoicectl.services._helpers import today_iso
from invoicectl.services.base import BaseService
from invoicectl.services.result import (
    DATABASE_ERROR,
    INVALID_COMMAND,
    VALIDATION_FAILED,
    ServiceError,
    ServiceResult,
)
from invoicectl.services.telemetry import stage, traced

logger = logging.getLogger(__name__)

CREATE_DB_ERROR = "Database Error: Failed to Create Invoice."
UPDATE_DB_ERROR = "Database Error: Failed to Update Invoice."
DELETE_DB_ERROR = "Database Error: Failed to Delete Invoice."

_OPS: dict[MutationKind, str] = {
    MutationKind.CREATE: "create_invoice",
    MutationKind.UPDATE: "update_invoice",
    MutationKind.DELETE: "delete_invoice",
}


class InvoiceService(BaseService):
    """Create, update, and delete invoices from raw form data."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def create_invoice(self, fields: Mapping[str, Any]) -> ServiceResult:
        """Validate *fields* and insert a new invoice dated today."""
        with stage("validate"):
            vr = validate_create(fields)
        if not vr.valid:
            return self._validation_failure(_OPS[MutationKind.CREATE], vr)
        assert vr.fields is not None
        return self._execute(MutationCommand.create(vr.fields))

    @traced
    def update_invoice(self, invoice_id: str, fields: Mapping[str, Any]) -> ServiceResult:
        """Validate *fields* and overwrite customer, amount, and status of *invoice_id*.

        The row is not looked up first: an unknown id updates zero rows
        and still succeeds.
        """
        with stage("validate"):
            vr = validate_update(fields)
        if not vr.valid:
            return self._validation_failure(_OPS[MutationKind.UPDATE], vr)
        assert vr.fields is not None
        return self._execute(MutationCommand.update(invoice_id, vr.fields))

    @traced
    def delete_invoice(self, invoice_id: Any) -> ServiceResult:
        """Delete *invoice_id*. Never reports failure to the caller."""
        return self._execute(MutationCommand.delete(str(invoice_id)))

    @traced
    def execute(self, command: MutationCommand) -> ServiceResult:
        """Run a prebuilt command.

        Returns an ``INVALID_COMMAND`` error if the command is missing the
        field set or target id its kind requires.
        """
        return self._execute(command)

    # ------------------------------------------------------------------
    # Execution (private)
    # ------------------------------------------------------------------

    def _execute(self, command: MutationCommand) -> ServiceResult:
        op = _OPS[command.kind]
        problems = command.problems()
        if problems:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=INVALID_COMMAND, message="; ".join(problems)),
            )

        if command.kind is MutationKind.CREATE:
            return self._run_create(command, op)
        if command.kind is MutationKind.UPDATE:
            return self._run_update(command, op)
        return self._run_delete(command, op)

    def _run_create(self, command: MutationCommand, op: str) -> ServiceResult:
        assert command.fields is not None
        fields = command.fields
        invoice_id = generate_id()
        amount_cents = fields.amount_cents
        date = today_iso()

        # ── PERSIST ───────────────────────────────────────────────
        with stage("persist"):
            try:
                with self._store.transaction() as conn:
                    conn.execute(
                        insert(invoices).values(
                            id=invoice_id,
                            customer_id=fields.customer_id,
                            amount=amount_cents,
                            status=fields.status.value,
                            date=date,
                        )
                    )
            except SQLAlchemyError:
                logger.error("Failed to create invoice", exc_info=True)
                return self._datastore_failure(op, CREATE_DB_ERROR)

        logger.debug("Created invoice %s (%d cents)", invoice_id, amount_cents)
        return self._success(
            op,
            {
                "id": invoice_id,
                "customer_id": fields.customer_id,
                "amount": amount_cents,
                "status": fields.status.value,
                "date": date,
            },
            redirect=True,
        )

    def _run_update(self, command: MutationCommand, op: str) -> ServiceResult:
        assert command.fields is not None and command.target_id is not None
        fields = command.fields
        amount_cents = fields.amount_cents

        with stage("persist") as st:
            try:
                with self._store.transaction() as conn:
                    res = conn.execute(
                        update(invoices)
                        .where(invoices.c.id == command.target_id)
                        .values(
                            customer_id=fields.customer_id,
                            amount=amount_cents,
                            status=fields.status.value,
                        )
                    )
            except SQLAlchemyError:
                logger.error("Failed to update invoice %s", command.target_id, exc_info=True)
                return self._datastore_failure(op, UPDATE_DB_ERROR)
            if st:
                st.note("rows", res.rowcount)

        logger.debug("Updated invoice %s (%d row(s))", command.target_id, res.rowcount)
        return self._success(
            op,
            {
                "id": command.target_id,
                "customer_id": fields.customer_id,
                "amount": amount_cents,
                "status": fields.status.value,
            },
            redirect=True,
        )

    def _run_delete(self, command: MutationCommand, op: str) -> ServiceResult:
        assert command.target_id is not None

        with stage("persist"):
            try:
                with self._store.transaction() as conn:
                    conn.execute(delete(invoices).where(invoices.c.id == command.target_id))
            except SQLAlchemyError:
                logger.error("%s id=%s", DELETE_DB_ERROR, command.target_id, exc_info=True)

        return self._success(op, {"id": command.target_id}, redirect=False)

    # ------------------------------------------------------------------
    # Result builders
    # ------------------------------------------------------------------

    def _success(self, op: str, data: dict[str, Any], *, redirect: bool) -> ServiceResult:
        warnings: list[str] = []
        path = self._store.settings.listing_path

        # ── REVALIDATE ────────────────────────────────────────────
        with stage("revalidate"):
            self._revalidate(path, warnings)

        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=warnings,
            redirect=path if redirect else None,
            revalidated=[path],
        )

    @staticmethod
    def _validation_failure(op: str, vr: ValidationResult) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code=VALIDATION_FAILED,
                message=vr.message or "Validation failed.",
                detail={"errors": vr.errors},
            ),
        )

    @staticmethod
    def _datastore_failure(op: str, message: str) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=DATABASE_ERROR, message=message),
        )
