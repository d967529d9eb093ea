# Overview: Service-layer operations for items; encapsulates business logic and database work.

from __future__ import annotations

from ..extensions import db
from ..models import Item, Location
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_item,
    validate_payload,
)


class ItemNotFoundError(Exception):
    """Raised when an item id does not exist."""
    pass


ITEM_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description", "price_cents", "quantity", "image_url", "location_id"},
    required_on_create={"name", "price_cents"},
)


def _check_location(patch: dict) -> None:
    location_id = patch.get("location_id")
    if location_id is not None and db.session.get(Location, location_id) is None:
        raise ValidationError(f"Location {location_id} not found")


def list_items() -> list[Item]:
    return db.session.query(Item).order_by(Item.created_at.desc(), Item.id.desc()).all()


def get_item(item_id: int) -> Item:
    item = db.session.get(Item, item_id)
    if not item:
        raise ItemNotFoundError("Item not found")
    return item


def create_item(payload: dict) -> Item:
    patch = validate_payload(model=Item, payload=payload, policy=ITEM_POLICY, partial=False)
    enforce_rules_item(patch)
    _check_location(patch)

    if patch.get("quantity") is None:
        patch["quantity"] = 0

    item = Item(**patch)
    db.session.add(item)
    db.session.commit()
    return item


def update_item(item_id: int, payload: dict) -> Item:
    """
    Partial update. Setting `quantity` here is a manual stock correction;
    sales never go through this path.
    """
    item = get_item(item_id)

    patch = validate_payload(model=Item, payload=payload, policy=ITEM_POLICY, partial=True)
    if not patch:
        raise ValidationError("No fields to update")
    enforce_rules_item(patch)
    _check_location(patch)

    for key, value in patch.items():
        setattr(item, key, value)

    db.session.commit()
    return item


def delete_item(item_id: int) -> dict:
    """Delete an item. Past sales keep their own snapshot of it."""
    item = get_item(item_id)
    data = item.to_dict()
    db.session.delete(item)
    db.session.commit()
    return data
