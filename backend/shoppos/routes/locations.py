# Overview: Flask API routes for shop locations.

from flask import Blueprint, request, jsonify

from ..services import location_service
from ..services.location_service import LocationInUseError, LocationNotFoundError
from ..validation import ConflictError, ValidationError
from ..decorators import require_auth, require_permission


locations_bp = Blueprint("locations", __name__, url_prefix="/api/locations")


@locations_bp.get("/")
@require_auth
@require_permission("VIEW_LOCATIONS")
def list_locations_route():
    locations = location_service.list_locations()
    return jsonify({"locations": [loc.to_dict() for loc in locations]}), 200


@locations_bp.get("/<int:location_id>")
@require_auth
@require_permission("VIEW_LOCATIONS")
def get_location_route(location_id: int):
    try:
        location = location_service.get_location(location_id)
    except LocationNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"location": location.to_dict()}), 200


@locations_bp.post("/")
@require_auth
@require_permission("MANAGE_LOCATIONS")
def create_location_route():
    data = request.get_json(silent=True) or {}
    try:
        location = location_service.create_location(data.get("name"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    return jsonify({"location": location.to_dict()}), 201


@locations_bp.route("/<int:location_id>", methods=["PATCH", "PUT"])
@require_auth
@require_permission("MANAGE_LOCATIONS")
def update_location_route(location_id: int):
    data = request.get_json(silent=True) or {}
    try:
        location = location_service.rename_location(location_id, data.get("name"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except LocationNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    return jsonify({"location": location.to_dict()}), 200


@locations_bp.delete("/<int:location_id>")
@require_auth
@require_permission("MANAGE_LOCATIONS")
def delete_location_route(location_id: int):
    try:
        location = location_service.delete_location(location_id)
    except LocationNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except LocationInUseError as e:
        return jsonify({"error": str(e), "details": e.details}), 409
    return jsonify({"message": "Location deleted successfully", "location": location}), 200
