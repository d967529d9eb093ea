"""
Sales Service - creating sales and reading the sales ledger.

Creation delegates the stock/ledger unit of work to the sale processor;
this module resolves references and builds the SQLAlchemy store.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.orm import joinedload

from ..actor import Actor
from ..extensions import db
from ..models import Location, Sale, User
from ..models.sales import PAYMENT_METHOD_CARD
from ..validation import ValidationError, coerce_int
from shoppos.time_utils import parse_iso_datetime, parse_range_end
from .sale_processor import (
    BANK_TAGGED_METHODS,
    SaleError,
    SaleErrorKind,
    parse_sale_request,
    process_sale,
)
from .sale_store import SqlAlchemySaleStore


SALE_FILTER_FIELDS = (
    "cashier_id",
    "location_id",
    "served_by_cashier_id",
    "partner_cashier_id",
)


def _check_references(request) -> None:
    """Referenced location/users must exist; otherwise the caller sent a bad payload."""
    if request.location_id is not None and db.session.get(Location, request.location_id) is None:
        raise SaleError(
            SaleErrorKind.MALFORMED_PAYLOAD,
            f"Location {request.location_id} not found",
            {"field": "location_id"},
        )
    for field in ("served_by_cashier_id", "partner_cashier_id"):
        user_id = getattr(request, field)
        if user_id is not None and db.session.get(User, user_id) is None:
            raise SaleError(
                SaleErrorKind.MALFORMED_PAYLOAD,
                f"User {user_id} not found",
                {"field": field},
            )


def create_sale(actor: Actor, payload) -> dict:
    """
    Validate the payload and run the sale transaction.

    Returns the persisted sale record. Raises SaleError.
    """
    request = parse_sale_request(payload)
    _check_references(request)
    # Reference lookups above are reads; end that transaction before the sale's own
    db.session.commit()

    return process_sale(
        SqlAlchemySaleStore(db.session),
        actor,
        request,
        enforce_total=current_app.config.get("ENFORCE_SALE_TOTAL", False),
    )


def list_sales(filters: dict) -> list[Sale]:
    """
    Sales newest first, filtered by payment method, attribution ids and
    created_at range (from/to, ISO dates or datetimes, inclusive).
    """
    query = db.session.query(Sale).options(
        joinedload(Sale.cashier),
        joinedload(Sale.served_by),
        joinedload(Sale.partner),
        joinedload(Sale.location),
    )

    method = (filters.get("payment_method") or "").strip()
    if method.upper() in BANK_TAGGED_METHODS:
        query = query.filter(Sale.payment_method == PAYMENT_METHOD_CARD, Sale.payment_bank == method.upper())
    elif method:
        query = query.filter(Sale.payment_method == method.lower())

    bank = (filters.get("payment_bank") or "").strip()
    if bank:
        query = query.filter(Sale.payment_bank == bank.upper())

    for field in SALE_FILTER_FIELDS:
        raw = filters.get(field)
        if raw not in (None, ""):
            query = query.filter(getattr(Sale, field) == coerce_int(raw, field))

    try:
        start = parse_iso_datetime(filters.get("from"))
        end = parse_range_end(filters.get("to"))
    except ValueError:
        raise ValidationError("from/to must be ISO-8601 dates")
    if start:
        query = query.filter(Sale.created_at >= start)
    if end:
        query = query.filter(Sale.created_at <= end)

    return query.order_by(Sale.created_at.desc(), Sale.id.desc()).all()


def get_sale(sale_id: int) -> Sale | None:
    return db.session.get(Sale, sale_id)
