"""
Inter-shop transfer offers.

LIFECYCLE:
1. pending: submitted by another shop (via a cashier or admin)
2. approved / rejected: reviewed once by an admin; terminal
"""
from __future__ import annotations

from ..extensions import db
from ..models import Offer
from ..models.offers import (
    OFFER_REVIEW_STATUSES,
    OFFER_STATUS_PENDING,
)
from shoppos.time_utils import utcnow
from .concurrency import lock_for_update, run_with_retry


class OfferError(Exception):
    """Raised when offer operations fail."""
    pass


class OfferNotFoundError(OfferError):
    pass


class OfferStateError(OfferError):
    """Offer is no longer pending."""
    pass


def create_offer(payload: dict, user_id: int | None) -> Offer:
    """
    Record a pending offer.

    Required: from_shop (non-empty string), items (non-empty list).
    Optional: requested_discount (any JSON value).
    """
    if not isinstance(payload, dict):
        raise OfferError("Invalid JSON payload")

    from_shop = payload.get("from_shop")
    items = payload.get("items")
    if not isinstance(from_shop, str) or not from_shop.strip() or not isinstance(items, list) or not items:
        raise OfferError("Missing or invalid fields")

    offer = Offer(
        from_shop=from_shop.strip(),
        items=items,
        requested_discount=payload.get("requested_discount"),
        status=OFFER_STATUS_PENDING,
        created_by_user_id=user_id,
    )
    db.session.add(offer)
    db.session.commit()
    return offer


def list_offers(status: str | None = None) -> list[Offer]:
    query = db.session.query(Offer)
    if status:
        query = query.filter(Offer.status == status)
    return query.order_by(Offer.created_at.desc(), Offer.id.desc()).all()


def review_offer(offer_id: int, status: str, reviewer_id: int) -> Offer:
    """Approve or reject a pending offer."""
    if status not in OFFER_REVIEW_STATUSES:
        raise OfferError("Invalid status")

    def _op():
        offer = lock_for_update(db.session.query(Offer).filter_by(id=offer_id)).first()
        if not offer:
            raise OfferNotFoundError("Offer not found")
        if offer.status != OFFER_STATUS_PENDING:
            raise OfferStateError(f"Offer already {offer.status}")

        offer.status = status
        offer.reviewed_by_user_id = reviewer_id
        offer.updated_at = utcnow()
        db.session.commit()
        return offer

    return run_with_retry(_op)
