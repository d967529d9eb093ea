# Overview: Route decorators that resolve the bearer session and gate on permissions.

from functools import wraps

from flask import current_app, g, jsonify, request

from .services import session_service


def bearer_token() -> str | None:
    """Token from `Authorization: Bearer <token>`, or None if the header is absent or malformed."""
    header = request.headers.get("Authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token.strip():
        return None
    return token.strip()


def require_auth(f):
    """
    Reject the request with 401 unless it carries a live session.

    On success the view sees g.current_user, g.actor (the Actor passed to
    services), g.session_context and g.token.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        token = bearer_token()
        if token is None:
            return jsonify({"error": "Authentication required"}), 401

        context = session_service.validate_session(token)
        if context is None:
            return jsonify({"error": "Invalid or expired token"}), 401

        g.current_user = context.user
        g.actor = context.actor
        g.session_context = context
        g.token = token
        return f(*args, **kwargs)

    return wrapper


def require_permission(permission_code: str):
    """403 unless g.actor's role grants permission_code. Stack below @require_auth."""
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            actor = getattr(g, "actor", None)
            if actor is None:
                return jsonify({"error": "Authentication required"}), 401

            if not actor.can(permission_code):
                current_app.logger.warning(
                    "Permission denied: user=%s role=%s permission=%s path=%s",
                    actor.id, actor.role, permission_code, request.path,
                )
                return jsonify({
                    "error": "Permission denied",
                    "required_permission": permission_code,
                    "message": f"Role '{actor.role}' lacks {permission_code}",
                }), 403

            return f(*args, **kwargs)

        return wrapper
    return decorator
