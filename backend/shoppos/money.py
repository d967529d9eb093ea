# Overview: Conversions between decimal amounts in request payloads and integer cents.

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


def to_cents(value) -> int:
    """
    Convert a decimal amount (number or numeric string) to integer cents.

    Rounds half-up to the nearest cent. Raises ValueError for anything that
    is not a finite number; booleans are rejected even though they are ints.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError("amount must be a number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError("amount must be a number")
    if not amount.is_finite():
        raise ValueError("amount must be a number")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_str(cents: int | None) -> str | None:
    """Render cents as a fixed two-decimal string (1050 -> "10.50")."""
    if cents is None:
        return None
    return str((Decimal(cents) / 100).quantize(Decimal("0.01")))
