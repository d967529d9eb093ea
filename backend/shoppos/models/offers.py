from __future__ import annotations

from ..extensions import db
from shoppos.time_utils import to_utc_z


OFFER_STATUS_PENDING = "pending"
OFFER_STATUS_APPROVED = "approved"
OFFER_STATUS_REJECTED = "rejected"
OFFER_REVIEW_STATUSES = (OFFER_STATUS_APPROVED, OFFER_STATUS_REJECTED)


class Offer(db.Model):
    """
    Inter-shop transfer offer.

    Another shop proposes to send items (optionally asking for a
    discount); an admin approves or rejects it once.
    """
    __tablename__ = "offers"
    __table_args__ = (
        db.Index("ix_offers_status_created", "status", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    from_shop = db.Column(db.String(255), nullable=False)
    items = db.Column(db.JSON, nullable=False)
    requested_discount = db.Column(db.JSON, nullable=True)

    status = db.Column(db.String(16), nullable=False, default=OFFER_STATUS_PENDING, index=True)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    reviewed_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "from_shop": self.from_shop,
            "items": self.items,
            "requested_discount": self.requested_discount,
            "status": self.status,
            "created_by_user_id": self.created_by_user_id,
            "reviewed_by_user_id": self.reviewed_by_user_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
