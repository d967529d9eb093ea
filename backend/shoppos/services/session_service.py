# Overview: Opaque bearer sessions: issue, resolve to an Actor, revoke and purge.

"""
Session tokens

The client holds a random 64-hex-character token; the database only ever
sees its SHA-256 digest. A session stops resolving when it passes its
absolute expiry (SESSION_ABSOLUTE_TIMEOUT_HOURS), sits unused longer than
SESSION_IDLE_TIMEOUT_HOURS, is revoked at logout, or its user is
deactivated.
"""

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from flask import current_app

from ..actor import Actor
from ..extensions import db
from ..models import SessionToken, User
from shoppos.time_utils import utcnow


@dataclass
class SessionContext:
    """What require_auth hands to the request: the user row, its session and the Actor."""
    user: User
    session: SessionToken
    actor: Actor


def _hours(key: str, default: int) -> timedelta:
    return timedelta(hours=current_app.config.get(key, default))


def generate_token() -> str:
    """Plaintext token for the client (32 random bytes, hex encoded)."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _active_by_token(token: str) -> SessionToken | None:
    return db.session.query(SessionToken).filter(
        SessionToken.token_hash == hash_token(token),
        SessionToken.is_revoked.is_(False),
    ).first()


def _revoke(session: SessionToken, reason: str, at: datetime) -> None:
    session.is_revoked = True
    session.revoked_at = at
    session.revoked_reason = reason


def create_session(
    user_id: int,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> tuple[SessionToken, str]:
    """Open a session for user_id. Returns (row, plaintext token)."""
    if db.session.get(User, user_id) is None:
        raise ValueError("User not found")

    token = generate_token()
    issued = utcnow()

    session = SessionToken(
        user_id=user_id,
        token_hash=hash_token(token),
        created_at=issued,
        last_used_at=issued,
        expires_at=issued + _hours("SESSION_ABSOLUTE_TIMEOUT_HOURS", 12),
        user_agent=(user_agent or "")[:512] or None,
        ip_address=ip_address,
        is_revoked=False,
    )
    db.session.add(session)
    db.session.commit()

    return session, token


def validate_session(token: str) -> SessionContext | None:
    """
    Resolve a presented token, or None when it no longer grants access.

    An idle session or one whose user was deactivated is revoked on the
    spot. Otherwise last_used_at is bumped.
    """
    session = _active_by_token(token)
    if session is None:
        return None

    now = utcnow()
    if session.expires_at < now:
        return None

    user = session.user
    if now - session.last_used_at > _hours("SESSION_IDLE_TIMEOUT_HOURS", 2):
        _revoke(session, "Idle timeout", now)
        db.session.commit()
        return None
    if user is None or not user.is_active:
        _revoke(session, "User account deactivated", now)
        db.session.commit()
        return None

    session.last_used_at = now
    db.session.commit()

    return SessionContext(user=user, session=session, actor=Actor(id=user.id, role=user.role))


def revoke_session(token: str, reason: str = "User logout") -> bool:
    """Revoke the session behind token. False if it was unknown or already revoked."""
    session = _active_by_token(token)
    if session is None:
        return False

    _revoke(session, reason, utcnow())
    db.session.commit()
    return True


def revoke_all_user_sessions(user_id: int, reason: str = "Revoke all sessions") -> int:
    """Revoke every live session of a user; returns how many were revoked."""
    now = utcnow()
    sessions = db.session.query(SessionToken).filter_by(user_id=user_id, is_revoked=False).all()
    for session in sessions:
        _revoke(session, reason, now)

    db.session.commit()
    return len(sessions)


def cleanup_expired_sessions(*, retention_days: int = 30) -> int:
    """Delete sessions that are expired or revoked and were created before the retention window."""
    now = utcnow()
    stale = db.or_(SessionToken.expires_at < now, SessionToken.is_revoked.is_(True))

    deleted = db.session.query(SessionToken).filter(
        stale,
        SessionToken.created_at < now - timedelta(days=retention_days),
    ).delete(synchronize_session=False)

    db.session.commit()
    return deleted
