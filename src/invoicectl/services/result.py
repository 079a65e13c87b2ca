"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
Expected failures (bad input, datastore errors) come back as values;
services never raise for them.

A result is one of three variants, exposed as :attr:`ServiceResult.kind`:

- ``success``: the write happened. ``redirect`` names the route the
  caller should navigate to, ``revalidated`` the cache paths signalled.
- ``validation_failure``: field errors in ``error.detail["errors"]``.
- ``datastore_failure``: a generic ``error.message``, no driver detail.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

VALIDATION_FAILED = "VALIDATION_FAILED"
DATABASE_ERROR = "DATABASE_ERROR"
INVALID_COMMAND = "INVALID_COMMAND"
NOT_FOUND = "NOT_FOUND"


class ResultKind(StrEnum):
    SUCCESS = "success"
    VALIDATION_FAILURE = "validation_failure"
    DATASTORE_FAILURE = "datastore_failure"
    ERROR = "error"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"create_invoice"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
        redirect: Route the caller should navigate to after success.
        revalidated: Cache paths signalled stale by this operation.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
    redirect: str | None = None
    revalidated: list[str] = Field(default_factory=list)

    @property
    def kind(self) -> ResultKind:
        if self.ok:
            return ResultKind.SUCCESS
        code = self.error.code if self.error else None
        if code == VALIDATION_FAILED:
            return ResultKind.VALIDATION_FAILURE
        if code == DATABASE_ERROR:
            return ResultKind.DATASTORE_FAILURE
        return ResultKind.ERROR

    @property
    def field_errors(self) -> dict[str, list[str]]:
        """Per-field validation messages (empty unless a validation failure)."""
        if self.error is None:
            return {}
        return dict(self.error.detail.get("errors", {}))

    def to_form_state(self) -> dict[str, Any]:
        """Render as the form state the dashboard re-renders with.

        ``{"errors": {...}, "message": "..."}`` on validation failure,
        ``{"message": "..."}`` on datastore failure, and
        ``{"message": None}`` on success.
        """
        if self.ok or self.error is None:
            return {"message": None}
        state: dict[str, Any] = {"message": self.error.message}
        if self.kind is ResultKind.VALIDATION_FAILURE:
            state["errors"] = self.field_errors
        return state
