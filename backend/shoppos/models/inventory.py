from __future__ import annotations

from ..extensions import db
from shoppos.money import cents_to_str
from shoppos.time_utils import to_utc_z


class Item(db.Model):
    """
    Sellable item with its on-hand quantity.

    Quantity is mutated only by sales (conditional decrement) and by
    manual admin updates. It never goes negative: the CHECK constraint
    backs up the guarded UPDATE used when selling.
    """
    __tablename__ = "items"
    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_items_quantity_non_negative"),
        db.CheckConstraint("price_cents >= 0", name="ck_items_price_non_negative"),
        db.Index("ix_items_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)

    # Authoritative storage in cents (frontend may only format for display)
    price_cents = db.Column(db.Integer, nullable=False)

    quantity = db.Column(db.Integer, nullable=False, default=0)

    # Opaque reference to an already-uploaded image
    image_url = db.Column(db.String(1024), nullable=True)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    location = db.relationship("Location", backref=db.backref("items", lazy=True))

    def __repr__(self) -> str:
        return f"<Item id={self.id} name={self.name!r} quantity={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price_cents": self.price_cents,
            "price": cents_to_str(self.price_cents),
            "quantity": self.quantity,
            "image_url": self.image_url,
            "location_id": self.location_id,
            "created_at": to_utc_z(self.created_at),
        }
