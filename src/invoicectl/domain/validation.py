"""Invoice form validation — explicit per-field rules.

Raw form data is untyped: every value may be missing, blank, or the
wrong type. Each field has one check function returning the messages
for that field. Checks run in declaration order and every failing
field is reported, so a form with three bad fields gets three error
lists back in one pass.

The form contract uses the dashboard's field names (``customerId``,
``amount``, ``status``). Keys outside the contract, including ``id``
and ``date``, are ignored: the server assigns both.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from invoicectl.domain.money import (
    MAX_AMOUNT_CENTS,
    AmountError,
    coerce_amount,
    format_cents,
    to_cents,
)
from invoicectl.domain.types import InvoiceStatus

CUSTOMER_ID = "customerId"
AMOUNT = "amount"
STATUS = "status"

MSG_SELECT_CUSTOMER = "Please select a customer."
MSG_AMOUNT_GT_ZERO = "Please enter an amount greater than $0."
MSG_AMOUNT_NOT_NUMBER = "Please enter a valid amount."
MSG_AMOUNT_TOO_LARGE = f"Please enter an amount no greater than {format_cents(MAX_AMOUNT_CENTS)}."
MSG_SELECT_STATUS = "Please select an invoice status."

CREATE_FAILED_MESSAGE = "Missing fields. Failed to create invoice."
UPDATE_FAILED_MESSAGE = "Missing fields. Failed to update invoice."


@dataclass(frozen=True)
class InvoiceFields:
    """A validated, typed invoice field set."""

    customer_id: str
    amount: Decimal
    status: InvoiceStatus

    @property
    def amount_cents(self) -> int:
        return to_cents(self.amount)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one form submission.

    Exactly one of ``fields`` / ``errors`` is populated.
    """

    fields: InvoiceFields | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)
    message: str | None = None

    @property
    def valid(self) -> bool:
        return self.fields is not None and not self.errors


# ---------------------------------------------------------------------------
# Field checks
# ---------------------------------------------------------------------------


def check_customer_id(value: Any) -> list[str]:
    if not isinstance(value, str) or not value.strip():
        return [MSG_SELECT_CUSTOMER]
    return []


def check_amount(value: Any) -> list[str]:
    try:
        amount = coerce_amount(value)
    except AmountError:
        return [MSG_AMOUNT_NOT_NUMBER]
    if amount <= 0:
        return [MSG_AMOUNT_GT_ZERO]
    try:
        cents = to_cents(amount)
    except AmountError:
        return [MSG_AMOUNT_TOO_LARGE]
    # A positive amount that rounds to zero cents stores as $0.00.
    if cents <= 0:
        return [MSG_AMOUNT_GT_ZERO]
    if cents > MAX_AMOUNT_CENTS:
        return [MSG_AMOUNT_TOO_LARGE]
    return []


def check_status(value: Any) -> list[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return [MSG_SELECT_STATUS]
    if value not in [s.value for s in InvoiceStatus]:
        allowed = ", ".join(repr(s.value) for s in InvoiceStatus)
        return [f"Invalid invoice status {value!r}. Expected one of {allowed}."]
    return []


# Declaration order is reporting order.
FIELD_RULES: tuple[tuple[str, Callable[[Any], list[str]]], ...] = (
    (CUSTOMER_ID, check_customer_id),
    (AMOUNT, check_amount),
    (STATUS, check_status),
)


def collect_errors(raw: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Run every field rule and return ``(field, message)`` pairs in order."""
    pairs: list[tuple[str, str]] = []
    for name, check in FIELD_RULES:
        for message in check(raw.get(name)):
            pairs.append((name, message))
    return pairs


def validate_invoice_fields(raw: Mapping[str, Any], *, failure_message: str) -> ValidationResult:
    """Validate a raw form map into :class:`InvoiceFields`.

    On failure, ``errors`` maps each failing field to its messages and
    ``message`` is *failure_message*.
    """
    pairs = collect_errors(raw)
    if pairs:
        errors: dict[str, list[str]] = {}
        for name, message in pairs:
            errors.setdefault(name, []).append(message)
        return ValidationResult(errors=errors, message=failure_message)

    return ValidationResult(
        fields=InvoiceFields(
            customer_id=raw[CUSTOMER_ID].strip(),
            amount=coerce_amount(raw.get(AMOUNT)),
            status=InvoiceStatus(raw[STATUS]),
        )
    )


def validate_create(raw: Mapping[str, Any]) -> ValidationResult:
    """Validate a create-invoice form."""
    return validate_invoice_fields(raw, failure_message=CREATE_FAILED_MESSAGE)


def validate_update(raw: Mapping[str, Any]) -> ValidationResult:
    """Validate an update-invoice form. Same rules as create."""
    return validate_invoice_fields(raw, failure_message=UPDATE_FAILED_MESSAGE)
