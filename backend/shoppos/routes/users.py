# Overview: Flask API routes for user administration.

from flask import Blueprint, request, jsonify, g, current_app

from ..services import auth_service
from ..services import session_service
from ..services.auth_service import PasswordValidationError, UserNotFoundError
from ..validation import ConflictError, ValidationError
from ..decorators import require_auth, require_permission


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("/")
@require_auth
@require_permission("MANAGE_USERS")
def list_users_route():
    users = auth_service.list_users()
    return jsonify({"users": [u.to_dict() for u in users]}), 200


@users_bp.post("/")
@require_auth
@require_permission("MANAGE_USERS")
def create_user_route():
    """
    Create a user.

    Required: email, password, role (admin | cashier). Optional: name, surname.
    """
    data = request.get_json(silent=True) or {}
    if not data.get("email") or not data.get("password") or not data.get("role"):
        return jsonify({"error": "email, password and role are required"}), 400

    try:
        auth_service.validate_password_strength(data["password"])
        user = auth_service.create_user(
            email=data["email"],
            password=data["password"],
            role=data["role"],
            name=data.get("name"),
            surname=data.get("surname"),
        )
    except (ValidationError, PasswordValidationError) as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409

    current_app.logger.info("User %s created by %s with role %s", user.id, g.actor.id, user.role)
    return jsonify({"user": user.to_dict()}), 201


@users_bp.route("/<int:user_id>", methods=["PATCH", "PUT"])
@require_auth
@require_permission("MANAGE_USERS")
def update_user_route(user_id: int):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    try:
        if data.get("password") is not None:
            auth_service.validate_password_strength(data["password"])
        user = auth_service.update_user(user_id, data)
    except UserNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except (ValidationError, PasswordValidationError) as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409

    # Deactivated users must not keep working tokens
    if not user.is_active:
        session_service.revoke_all_user_sessions(user.id, reason="User deactivated")

    return jsonify({"user": user.to_dict()}), 200


@users_bp.delete("/<int:user_id>")
@require_auth
@require_permission("MANAGE_USERS")
def delete_user_route(user_id: int):
    try:
        user = auth_service.delete_user(user_id, actor_user_id=g.actor.id)
    except UserNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409

    if not user.is_active:
        session_service.revoke_all_user_sessions(user.id, reason="User deactivated")
        return jsonify({
            "message": "User has recorded sales and was deactivated instead of deleted",
            "user": user.to_dict(),
        }), 200

    return jsonify({"message": "User deleted successfully"}), 200
