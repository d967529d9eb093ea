from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, Integer, String, Text

from shoppos.time_utils import parse_iso_datetime


# 9,999,999.99 in the shop currency
MAX_PRICE_CENTS = 999_999_999

# Basis points, so 10_000 is 100%
MAX_TAX_RATE_BPS = 10_000

# Bounds of a signed 32-bit Integer column
MAX_DB_INT = 2_147_483_647
MIN_DB_INT = -MAX_DB_INT - 1

_PLAIN_INT_RE = re.compile(r"^-?\d+$")


class ValidationError(ValueError):
    """Bad client input; routes answer 400."""


class ConflictError(ValueError):
    """Input is well formed but collides with existing state; routes answer 409."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """Which columns a client may write, and which of them a create must supply."""
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)


def coerce_int(value: Any, field_name: str) -> int:
    """
    Accept a real int, an integral float such as 3.0, or a string of digits.

    bool is refused even though it subclasses int. Fractional floats,
    decimal strings and exponent forms such as "1e3" are refused too, as
    is anything outside the signed 32-bit range of an Integer column.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field_name} must be an integer, not a decimal")
        value = int(value)
    if isinstance(value, int):
        return _in_column_range(value, field_name)
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be an integer")

    text = value.strip()
    if "." in text:
        raise ValidationError(f"{field_name} must be an integer (no decimals)")
    if "e" in text.lower():
        raise ValidationError(f"{field_name} must be a plain integer (scientific notation not allowed)")
    if not _PLAIN_INT_RE.match(text):
        raise ValidationError(f"{field_name} must be an integer")
    return _in_column_range(int(text), field_name)


def _in_column_range(value: int, field_name: str) -> int:
    if not MIN_DB_INT <= value <= MAX_DB_INT:
        raise ValidationError(f"{field_name} is out of range")
    return value


def coerce_bool(value: Any, field_name: str) -> bool:
    """Only a JSON true/false is accepted; "false", 0 and the like are refused."""
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false")
    return value


def _as_datetime(value: Any, field_name: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a datetime")
    try:
        parsed = parse_iso_datetime(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{field_name} must be an ISO-8601 datetime")
    return parsed


def _convert(column, value: Any):
    kind = column.type
    if isinstance(kind, Boolean):
        return coerce_bool(value, column.key)
    if isinstance(kind, Integer):
        return coerce_int(value, column.key)
    if isinstance(kind, DateTime):
        return _as_datetime(value, column.key)
    if isinstance(kind, (String, Text)):
        return str(value).strip()
    return value


def _check_text(column, value: Any) -> None:
    if not isinstance(value, str):
        return
    if not column.nullable and isinstance(column.type, (String, Text)) and value == "":
        raise ValidationError(f"{column.key} cannot be blank")
    limit = getattr(column.type, "length", None)
    if isinstance(column.type, String) and limit and len(value) > limit:
        raise ValidationError(f"{column.key} exceeds max length {limit}")


def validate_payload(
    *,
    model,
    payload: dict | None,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Turn a JSON body into a clean column patch for `model`.

    Keys outside policy.writable_fields are rejected rather than dropped.
    Values are converted by column type, nullability and String(n) length
    are enforced from the mapper. With partial=False the policy's
    required_on_create fields must all be present.
    """
    payload = {} if payload is None else payload
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(name for name in policy.required_on_create if name not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    columns = {column.key: column for column in model.__mapper__.columns}

    patch: dict = {}
    for key, raw in payload.items():
        if key not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {key}")
        column = columns.get(key)
        if column is None:
            raise ValidationError(f"Unknown field: {key}")

        if raw is None:
            if not column.nullable:
                raise ValidationError(f"{key} cannot be null")
            patch[key] = None
            continue

        value = _convert(column, raw)
        _check_text(column, value)
        patch[key] = value

    return patch


def enforce_rules_item(patch: dict) -> None:
    """Item rules the column types cannot express."""
    price = patch.get("price_cents")
    if price is not None:
        if price < 0:
            raise ValidationError("price_cents must be >= 0")
        if price > MAX_PRICE_CENTS:
            raise ValidationError(f"price_cents cannot exceed {MAX_PRICE_CENTS} ({MAX_PRICE_CENTS / 100:,.2f})")

    quantity = patch.get("quantity")
    if quantity is not None and quantity < 0:
        raise ValidationError("quantity must be >= 0")


def enforce_rules_settings(patch: dict) -> None:
    rate = patch.get("tax_rate_bps")
    if rate is not None and not 0 <= rate <= MAX_TAX_RATE_BPS:
        raise ValidationError(f"tax_rate_bps must be between 0 and {MAX_TAX_RATE_BPS}")

    if patch.get("currency") is not None:
        patch["currency"] = patch["currency"].upper()
