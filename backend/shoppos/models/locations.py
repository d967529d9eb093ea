from __future__ import annotations

from ..extensions import db
from shoppos.time_utils import to_utc_z


class Location(db.Model):
    """
    Physical shop location.

    Sales and items may reference a location; a location that is still
    referenced cannot be deleted.
    """
    __tablename__ = "locations"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_locations_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Location id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": to_utc_z(self.created_at),
        }
