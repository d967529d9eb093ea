# Overview: Sale transaction processing; validates a cart and applies it to the store as one unit of work.

"""
Sale Transaction Processor

A sale is recorded if and only if every line's stock decrement succeeded.
Lines are applied in the order supplied, each with a single guarded
decrement ("subtract qty where quantity >= qty"). The first line that
affects zero rows aborts the whole unit of work: the store is rolled back,
so decrements already applied for earlier lines are undone too, and no
sale row exists.

The store is an injected collaborator (see SaleStore) so the same code
runs against SQLAlchemy in production and an in-memory fake in tests.
Nothing here retries; a caller that gets INSUFFICIENT_STOCK must change
the cart, a caller that gets PERSISTENCE_FAILURE may resubmit unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from ..actor import Actor
from ..models.sales import PAYMENT_METHOD_CARD, PAYMENT_METHOD_CASH
from ..money import to_cents
from ..validation import MAX_DB_INT, MAX_PRICE_CENTS, ValidationError, coerce_int
from shoppos.time_utils import utcnow


# Bank-tagged method names older POS clients send instead of "card"
BANK_TAGGED_METHODS = ("BOG", "TBC")


class SaleErrorKind(str, Enum):
    MALFORMED_PAYLOAD = "malformed_payload"
    ITEM_NOT_FOUND = "item_not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    PERSISTENCE_FAILURE = "persistence_failure"


class SaleError(Exception):
    """Raised for sale operation errors. `kind` says whether resubmitting can help."""
    def __init__(self, kind: SaleErrorKind, message: str, details: dict | None = None):
        super().__init__(message)
        self.kind = kind
        self.details = details or {}


class StoreError(Exception):
    """Raised by a SaleStore when the underlying storage fails."""


@dataclass(frozen=True)
class LineItem:
    item_id: int
    qty: int
    # Optional client-side snapshot values; filled from the item row when absent
    name: str | None = None
    price_cents: int | None = None


@dataclass(frozen=True)
class SaleRequest:
    items: tuple[LineItem, ...]
    total_cents: int
    payment_method: str
    payment_bank: str | None = None
    location_id: int | None = None
    served_by_cashier_id: int | None = None
    partner_cashier_id: int | None = None


@dataclass(frozen=True)
class ItemStock:
    id: int
    quantity: int
    name: str
    price_cents: int


class SaleStore(Protocol):
    """
    Storage capability the processor needs.

    begin/commit/rollback delimit one unit of work; everything between
    them becomes visible to other readers atomically or not at all.
    """

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def conditional_decrement(self, item_id: int, qty: int) -> int:
        """Subtract qty where quantity >= qty; return rows affected (0 or 1)."""
        ...

    def lookup(self, item_id: int) -> ItemStock | None: ...

    def insert_sale(self, record: dict) -> dict:
        """Persist one sale row; return it with its generated id."""
        ...


def _malformed(message: str, **details) -> SaleError:
    return SaleError(SaleErrorKind.MALFORMED_PAYLOAD, message, details or None)


def _optional_int(payload: dict, field: str) -> int | None:
    value = payload.get(field)
    if value is None or value == "":
        return None
    try:
        return coerce_int(value, field)
    except ValidationError as exc:
        raise _malformed(str(exc), field=field)


def normalize_payment_method(method: Any) -> tuple[str, str | None]:
    """
    Map a client payment method onto the closed set (cash, card).

    Returns (method, implied_bank). "BOG"/"TBC" mean a card payment
    through that bank.
    """
    if not isinstance(method, str) or not method.strip():
        raise _malformed("payment_method is required")
    raw = method.strip()
    lowered = raw.lower()
    if lowered == PAYMENT_METHOD_CASH:
        return PAYMENT_METHOD_CASH, None
    if lowered == PAYMENT_METHOD_CARD:
        return PAYMENT_METHOD_CARD, None
    if raw.upper() in BANK_TAGGED_METHODS:
        return PAYMENT_METHOD_CARD, raw.upper()
    raise _malformed(
        f"Invalid payment_method {raw!r} (expected cash, card, or one of {', '.join(BANK_TAGGED_METHODS)})",
        field="payment_method",
    )


def normalize_payment_bank(payment_method: str, payment_bank: Any) -> str | None:
    """Upper-cased bank tag for card payments; always None for cash."""
    if payment_method != PAYMENT_METHOD_CARD:
        return None
    if payment_bank is None:
        return None
    bank = str(payment_bank).strip().upper()
    return bank or None


def _parse_line(index: int, raw: Any) -> LineItem:
    if not isinstance(raw, dict):
        raise _malformed("Invalid item payload", index=index)

    try:
        item_id = coerce_int(raw.get("id"), "id")
        qty = coerce_int(raw.get("qty"), "qty")
    except ValidationError as exc:
        raise _malformed(f"Invalid item payload: {exc}", index=index)

    if qty <= 0:
        raise _malformed("Invalid item quantity", index=index, item_id=item_id, qty=qty)

    name = raw.get("name")
    if name is not None and not isinstance(name, str):
        raise _malformed("Item name must be a string", index=index, item_id=item_id)

    price_cents = None
    if raw.get("price") is not None:
        try:
            price_cents = to_cents(raw["price"])
        except ValueError:
            raise _malformed("Item price must be a number", index=index, item_id=item_id)
        if not 0 <= price_cents <= MAX_PRICE_CENTS:
            raise _malformed(f"Item price must be between 0 and {MAX_PRICE_CENTS / 100:.2f}", index=index, item_id=item_id)

    return LineItem(item_id=item_id, qty=qty, name=name, price_cents=price_cents)


def parse_sale_request(payload: Any) -> SaleRequest:
    """
    Validate and normalize a create-sale payload.

    Raises SaleError(MALFORMED_PAYLOAD) for anything the caller must fix
    before resubmitting.
    """
    if not isinstance(payload, dict):
        raise _malformed("Invalid JSON payload")

    raw_items = payload.get("items")
    if not isinstance(raw_items, list) or not raw_items:
        raise _malformed("Items are required")
    items = tuple(_parse_line(i, raw) for i, raw in enumerate(raw_items))

    total = payload.get("total")
    if total is None or total == "":
        raise _malformed("Total and payment method are required")
    try:
        total_cents = to_cents(total)
    except ValueError:
        raise _malformed("total must be a number", field="total")
    if total_cents < 0:
        raise _malformed("total must be >= 0", field="total")
    if total_cents > MAX_DB_INT:
        raise _malformed("total is out of range", field="total")

    if payload.get("payment_method") in (None, ""):
        raise _malformed("Total and payment method are required")
    method, implied_bank = normalize_payment_method(payload["payment_method"])
    bank = payload.get("payment_bank")
    if bank is not None and not isinstance(bank, str):
        raise _malformed("payment_bank must be a string", field="payment_bank")

    return SaleRequest(
        items=items,
        total_cents=total_cents,
        payment_method=method,
        payment_bank=normalize_payment_bank(method, bank or implied_bank),
        location_id=_optional_int(payload, "location_id"),
        served_by_cashier_id=_optional_int(payload, "served_by_cashier_id"),
        partner_cashier_id=_optional_int(payload, "partner_cashier_id"),
    )


def _apply_line(store: SaleStore, line: LineItem) -> dict:
    """Decrement stock for one line and return its ledger snapshot."""
    affected = store.conditional_decrement(line.item_id, line.qty)
    if affected != 1:
        stock = store.lookup(line.item_id)
        if stock is None:
            raise SaleError(
                SaleErrorKind.ITEM_NOT_FOUND,
                f"Item with id {line.item_id} not found",
                {"item_id": line.item_id},
            )
        raise SaleError(
            SaleErrorKind.INSUFFICIENT_STOCK,
            f"Insufficient stock for item {line.item_id}. Available: {stock.quantity}, Requested: {line.qty}",
            {"item_id": line.item_id, "available": stock.quantity, "requested": line.qty},
        )

    name, price_cents = line.name, line.price_cents
    if name is None or price_cents is None:
        stock = store.lookup(line.item_id)
        if stock is not None:
            name = stock.name if name is None else name
            price_cents = stock.price_cents if price_cents is None else price_cents

    return {
        "id": line.item_id,
        "qty": line.qty,
        "name": name,
        "price_cents": price_cents,
    }


def _check_total(request: SaleRequest, snapshot: list[dict]) -> None:
    expected = sum((line["price_cents"] or 0) * line["qty"] for line in snapshot)
    if expected != request.total_cents:
        raise _malformed(
            "Total does not match line items",
            expected_total_cents=expected,
            submitted_total_cents=request.total_cents,
        )


def _persistence_failure(request: SaleRequest) -> SaleError:
    return SaleError(
        SaleErrorKind.PERSISTENCE_FAILURE,
        "Failed to save sale",
        {"item_ids": [line.item_id for line in request.items]},
    )


def process_sale(
    store: SaleStore,
    actor: Actor,
    request: SaleRequest,
    *,
    enforce_total: bool = False,
    now: datetime | None = None,
) -> dict:
    """
    Apply every line's decrement and record one sale, or change nothing.

    `actor` must already be authorized to create sales.
    Returns the persisted sale record.
    """
    try:
        store.begin()
    except StoreError as exc:
        raise _persistence_failure(request) from exc

    try:
        snapshot = [_apply_line(store, line) for line in request.items]

        if enforce_total:
            _check_total(request, snapshot)

        sale = store.insert_sale({
            "cashier_id": actor.id,
            "items": snapshot,
            "total_cents": request.total_cents,
            "payment_method": request.payment_method,
            "payment_bank": normalize_payment_bank(request.payment_method, request.payment_bank),
            "location_id": request.location_id,
            "served_by_cashier_id": request.served_by_cashier_id,
            "partner_cashier_id": request.partner_cashier_id,
            "created_at": now or utcnow(),
        })
        store.commit()
    except SaleError:
        store.rollback()
        raise
    except StoreError as exc:
        store.rollback()
        raise _persistence_failure(request) from exc
    except Exception:
        store.rollback()
        raise

    return sale
