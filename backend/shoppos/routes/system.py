# backend/shoppos/routes/system.py
"""
Liveness and build info. Neither endpoint needs a token.
"""

import os
import time

from flask import Blueprint, current_app

from ..extensions import db
from ..models import Item, SessionToken, User
from shoppos.time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """Run a few row counts; a failure marks the database unhealthy."""
    started = time.perf_counter()
    report: dict = {"status": "healthy"}
    try:
        report["details"] = {
            "users": db.session.query(User).count(),
            "items": db.session.query(Item).count(),
            "active_sessions": db.session.query(SessionToken).filter_by(is_revoked=False).count(),
        }
    except Exception:
        current_app.logger.exception("Database health check failed")
        db.session.rollback()
        report = {"status": "unhealthy", "error": "Database error"}

    report["latency_ms"] = round((time.perf_counter() - started) * 1000, 2)
    return report


@system_bp.get("/health")
def health():
    database = check_database_health()
    status = database["status"]
    return {
        "status": status,
        "timestamp": to_utc_z(utcnow()),
        "checks": {"database": database},
    }, (200 if status == "healthy" else 503)


@system_bp.get("/version")
def version():
    env = os.environ
    return {
        "version": env.get("APP_VERSION", "dev"),
        "git_sha": env.get("GIT_SHA"),
        "build_time": env.get("BUILD_TIME"),
    }, 200
