# Overview: Flask API routes for login, logout and the current-user lookup.

# backend/shoppos/routes/auth.py
"""
Accounts are provisioned by an admin (POST /api/users or `flask users
create`); there is no self sign-up. Login trades email and password for
an opaque bearer token, logout revokes it.
"""

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import bearer_token, require_auth
from ..permissions import get_role_permissions
from ..services import auth_service, session_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _permissions_for(role: str) -> list[str]:
    return sorted(get_role_permissions(role))


@auth_bp.post("/register")
def register_route():
    return jsonify({
        "error": "Self-registration is disabled. Contact an administrator to create an account."
    }), 403


@auth_bp.post("/login")
def login_route():
    data = request.get_json(silent=True) or {}
    email = data.get("email")
    password = data.get("password")
    if not email or not password:
        return jsonify({"error": "email and password required"}), 400

    try:
        user = auth_service.authenticate(email, password)
        if user is None:
            current_app.logger.warning("Failed login for %s from %s", email, request.remote_addr)
            return jsonify({"error": "Invalid credentials"}), 401

        session, token = session_service.create_session(
            user_id=user.id,
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr,
        )
    except Exception:
        current_app.logger.exception("Login failed for %s", email)
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "user": user.to_dict(),
        "permissions": _permissions_for(user.role),
        "token": token,
        "session": session.to_dict(),
        "message": "Login successful",
    }), 200


@auth_bp.post("/logout")
def logout_route():
    """Revoke the presented bearer token. 401 if it was already dead."""
    token = bearer_token()
    if token is None:
        return jsonify({"error": "Authorization header required"}), 401

    if not session_service.revoke_session(token, reason="User logout"):
        return jsonify({"error": "Invalid or expired token"}), 401

    return jsonify({"message": "Logout successful"}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify({
        "user": g.current_user.to_dict(),
        "permissions": _permissions_for(g.actor.role),
    }), 200
