# Overview: Service-layer operations for shop locations.

from __future__ import annotations

from ..extensions import db
from ..models import Item, Location, Sale
from ..validation import ConflictError, ValidationError


class LocationNotFoundError(Exception):
    """Raised when a location id does not exist."""
    pass


class LocationInUseError(ConflictError):
    """Raised when deleting a location that sales or items still reference."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


def _clean_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Location name is required")
    name = name.strip()
    if len(name) > 128:
        raise ValidationError("Location name exceeds max length 128")
    return name


def list_locations() -> list[Location]:
    return db.session.query(Location).order_by(Location.name.asc()).all()


def get_location(location_id: int) -> Location:
    location = db.session.get(Location, location_id)
    if not location:
        raise LocationNotFoundError("Location not found")
    return location


def create_location(name) -> Location:
    name = _clean_name(name)
    if db.session.query(Location).filter_by(name=name).first():
        raise ConflictError("Location with this name already exists")

    location = Location(name=name)
    db.session.add(location)
    db.session.commit()
    return location


def rename_location(location_id: int, name) -> Location:
    name = _clean_name(name)
    location = get_location(location_id)

    clash = db.session.query(Location).filter(
        Location.name == name,
        Location.id != location_id,
    ).first()
    if clash:
        raise ConflictError("Another location with this name already exists")

    location.name = name
    db.session.commit()
    return location


def delete_location(location_id: int) -> dict:
    location = get_location(location_id)

    sales_count = db.session.query(Sale).filter_by(location_id=location_id).count()
    if sales_count:
        raise LocationInUseError(
            "Cannot delete location. It is referenced in sales records.",
            {"sales_count": sales_count},
        )

    items_count = db.session.query(Item).filter_by(location_id=location_id).count()
    if items_count:
        raise LocationInUseError(
            "Cannot delete location. It is assigned to items.",
            {"items_count": items_count},
        )

    data = location.to_dict()
    db.session.delete(location)
    db.session.commit()
    return data
