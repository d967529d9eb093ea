# Overview: Flask API routes for items; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify

from ..services import inventory_service
from ..services.inventory_service import ItemNotFoundError
from ..validation import ValidationError
from ..decorators import require_auth, require_permission


items_bp = Blueprint("items", __name__, url_prefix="/api/items")


@items_bp.get("/")
@require_auth
@require_permission("VIEW_ITEMS")
def list_items_route():
    items = inventory_service.list_items()
    return jsonify({"items": [item.to_dict() for item in items]}), 200


@items_bp.get("/<int:item_id>")
@require_auth
@require_permission("VIEW_ITEMS")
def get_item_route(item_id: int):
    try:
        item = inventory_service.get_item(item_id)
    except ItemNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"item": item.to_dict()}), 200


@items_bp.post("/")
@require_auth
@require_permission("MANAGE_ITEMS")
def create_item_route():
    """
    Create an item.

    Required: name, price_cents. Optional: description, quantity,
    image_url, location_id.
    """
    try:
        item = inventory_service.create_item(request.get_json(silent=True))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"item": item.to_dict()}), 201


@items_bp.route("/<int:item_id>", methods=["PATCH", "PUT"])
@require_auth
@require_permission("MANAGE_ITEMS")
def update_item_route(item_id: int):
    try:
        item = inventory_service.update_item(item_id, request.get_json(silent=True))
    except ItemNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"item": item.to_dict()}), 200


@items_bp.delete("/<int:item_id>")
@require_auth
@require_permission("MANAGE_ITEMS")
def delete_item_route(item_id: int):
    try:
        item = inventory_service.delete_item(item_id)
    except ItemNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"message": "Item deleted successfully", "item": item}), 200
