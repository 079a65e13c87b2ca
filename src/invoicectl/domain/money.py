"""Monetary conversion between form amounts and stored integer cents.

Amounts arrive as decimal strings or numbers and are stored as integer
cents. Conversion goes through :class:`decimal.Decimal` built from the
value's string form, so ``10.50`` becomes exactly ``1050``.

Rounding is ROUND_HALF_UP at the cent: ``0.005`` -> ``1``.

The amount column is a signed 64-bit integer, so the largest storable
amount is :data:`MAX_AMOUNT_CENTS` cents.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS_PER_UNIT = 100
MAX_AMOUNT_CENTS = 2**63 - 1

# Amounts with more integer digits than this cannot be quantized at the
# default 28-digit context precision; every one is far above the cap.
_MAX_INTEGER_DIGITS = 20


class AmountError(ValueError):
    """Raised when a raw value cannot be coerced to a finite amount."""


def coerce_amount(value: object) -> Decimal:
    """Coerce a raw form value to a :class:`Decimal`.

    Mirrors browser-form coercion: a missing value or a blank string
    coerces to zero. Booleans and non-finite numbers are rejected.

    Raises:
        AmountError: If *value* is not numeric.
    """
    if value is None:
        return Decimal(0)
    if isinstance(value, bool):
        raise AmountError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        text = str(value).strip()
        if not text:
            return Decimal(0)
        try:
            amount = Decimal(text)
        except InvalidOperation as exc:
            raise AmountError(f"Not a number: {value!r}") from exc
    else:
        raise AmountError(f"Not a number: {value!r}")

    if not amount.is_finite():
        raise AmountError(f"Not a finite number: {value!r}")
    return amount


def to_cents(amount: Decimal) -> int:
    """Convert a decimal amount to integer cents (ROUND_HALF_UP).

    Raises:
        AmountError: If *amount* is too large to convert.
    """
    if amount and amount.adjusted() >= _MAX_INTEGER_DIGITS:
        raise AmountError(f"Amount too large: {amount}")
    scaled = (amount * CENTS_PER_UNIT).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(scaled)


def format_cents(cents: int) -> str:
    """Format integer cents as a dollar string.

    Examples:
        >>> format_cents(1050)
        '$10.50'
        >>> format_cents(123456789)
        '$1,234,567.89'
    """
    units = Decimal(cents) / CENTS_PER_UNIT
    return f"${units:,.2f}"
