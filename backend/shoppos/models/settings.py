from __future__ import annotations

from ..extensions import db
from shoppos.time_utils import to_utc_z


DEFAULT_SHOP_SETTINGS = {
    "shop_name": "Clothing Shop",
    "tax_rate_bps": 0,
    "currency": "GEL",
    "receipt_header": "Thank you for shopping with us!",
    "receipt_footer": "Please come again",
}


class ShopSettings(db.Model):
    """Single-row shop configuration shown on receipts and the admin screen."""
    __tablename__ = "shop_settings"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    shop_name = db.Column(db.String(255), nullable=False)

    # Tax rate in basis points (1800 = 18%)
    tax_rate_bps = db.Column(db.Integer, nullable=False, default=0)

    currency = db.Column(db.String(8), nullable=False)
    receipt_header = db.Column(db.String(512), nullable=True)
    receipt_footer = db.Column(db.String(512), nullable=True)

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
            "shop_name": self.shop_name,
            "tax_rate_bps": self.tax_rate_bps,
            "currency": self.currency,
            "receipt_header": self.receipt_header,
            "receipt_footer": self.receipt_footer,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
