from __future__ import annotations

from flask import Blueprint, jsonify, request

from ..decorators import require_auth, require_permission
from ..services import settings_service
from ..validation import ValidationError


settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.get("/")
@require_auth
def get_settings_route():
    return jsonify({"settings": settings_service.get_settings()}), 200


@settings_bp.put("/")
@require_auth
@require_permission("MANAGE_SETTINGS")
def update_settings_route():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    try:
        settings = settings_service.update_settings(payload)
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify({"settings": settings.to_dict()}), 200
