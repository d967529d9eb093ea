from __future__ import annotations

from ..extensions import db
from shoppos.money import cents_to_str
from shoppos.time_utils import to_utc_z


PAYMENT_METHOD_CASH = "cash"
PAYMENT_METHOD_CARD = "card"
PAYMENT_METHODS = (PAYMENT_METHOD_CASH, PAYMENT_METHOD_CARD)


class Sale(db.Model):
    """
    Completed sale (ledger row).

    Written exactly once, in the same transaction that decrements stock
    for every line. Lines are a denormalized snapshot (id, qty, name,
    price_cents) so later item edits never rewrite history.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_created_at", "created_at"),
        db.Index("ix_sales_cashier_created", "cashier_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Actor that rang up the sale
    cashier_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    items = db.Column(db.JSON, nullable=False)

    total_cents = db.Column(db.Integer, nullable=False)

    payment_method = db.Column(db.String(16), nullable=False, index=True)
    payment_bank = db.Column(db.String(32), nullable=True)

    # Multi-location attribution
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True, index=True)
    served_by_cashier_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    partner_cashier_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    cashier = db.relationship("User", foreign_keys=[cashier_id])
    served_by = db.relationship("User", foreign_keys=[served_by_cashier_id])
    partner = db.relationship("User", foreign_keys=[partner_cashier_id])
    location = db.relationship("Location")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cashier_id": self.cashier_id,
            "items": self.items,
            "total_cents": self.total_cents,
            "total": cents_to_str(self.total_cents),
            "payment_method": self.payment_method,
            "payment_bank": self.payment_bank,
            "location_id": self.location_id,
            "served_by_cashier_id": self.served_by_cashier_id,
            "partner_cashier_id": self.partner_cashier_id,
            "created_at": to_utc_z(self.created_at),
        }

    def to_detail_dict(self) -> dict:
        """Sale plus the joined names the history screens display."""
        data = self.to_dict()
        data.update({
            "cashier_email": self.cashier.email if self.cashier else None,
            "cashier_name": self.cashier.name if self.cashier else None,
            "cashier_surname": self.cashier.surname if self.cashier else None,
            "served_by_email": self.served_by.email if self.served_by else None,
            "served_by_name": self.served_by.name if self.served_by else None,
            "served_by_surname": self.served_by.surname if self.served_by else None,
            "partner_email": self.partner.email if self.partner else None,
            "partner_name": self.partner.name if self.partner else None,
            "partner_surname": self.partner.surname if self.partner else None,
            "location_name": self.location.name if self.location else None,
        })
        return data
