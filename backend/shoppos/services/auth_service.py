# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Staff account service.

Passwords are hashed with bcrypt. Roles are a single value per user
(admin or cashier). Emails are unique.
"""

import bcrypt
import re
from flask import current_app, has_app_context

from ..extensions import db
from ..models import User, Sale
from ..models.auth import ROLES
from ..validation import ValidationError, ConflictError, coerce_bool
from shoppos.time_utils import utcnow


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


class UserNotFoundError(Exception):
    """Raised when a user id does not exist."""
    pass


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Requirements:
    - Minimum 8 characters
    - At least one letter
    - At least one digit

    Raises PasswordValidationError if requirements not met.
    """
    if not isinstance(password, str) or len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Za-z]', password):
        raise PasswordValidationError("Password must contain at least one letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Password is validated for strength before hashing. Cost factor comes
    from BCRYPT_ROUNDS (default 12); tests lower it.
    """
    validate_password_strength(password)
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12) if has_app_context() else 12
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns True if password matches hash, False otherwise.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash in the database
        return False


def _normalize_email(email) -> str:
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("email is required")
    email = email.strip().lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("email is not valid")
    return email


def _validate_role(role) -> str:
    if role not in ROLES:
        raise ValidationError(f"Invalid role (expected one of: {', '.join(ROLES)})")
    return role


def create_user(
    email: str,
    password: str,
    role: str,
    name: str | None = None,
    surname: str | None = None,
) -> User:
    """
    Create new user with bcrypt password hashing.

    Raises:
        ValidationError: bad email or role
        ConflictError: email already registered
        PasswordValidationError: weak password
    """
    email = _normalize_email(email)
    role = _validate_role(role)

    existing = db.session.query(User).filter_by(email=email).first()
    if existing:
        raise ConflictError("User with this email already exists")

    user = User(
        email=email,
        password_hash=hash_password(password),
        role=role,
        name=(name or "").strip() or None,
        surname=(surname or "").strip() or None,
    )

    db.session.add(user)
    db.session.commit()
    return user


def update_user(user_id: int, data: dict) -> User:
    """Partial update of email, role, name, surname, is_active or password."""
    user = db.session.get(User, user_id)
    if not user:
        raise UserNotFoundError("User not found")

    allowed = {"email", "role", "name", "surname", "is_active", "password"}
    unknown = [k for k in data.keys() if k not in allowed]
    if unknown:
        raise ValidationError(f"Field not allowed: {unknown[0]}")
    if not data:
        raise ValidationError("No fields to update")
    is_active = coerce_bool(data["is_active"], "is_active") if "is_active" in data else None

    if "email" in data:
        email = _normalize_email(data["email"])
        clash = db.session.query(User).filter(User.email == email, User.id != user_id).first()
        if clash:
            raise ConflictError("Another user with this email already exists")
        user.email = email
    if "role" in data:
        user.role = _validate_role(data["role"])
    if "name" in data:
        user.name = (data["name"] or "").strip() or None
    if "surname" in data:
        user.surname = (data["surname"] or "").strip() or None
    if is_active is not None:
        user.is_active = is_active
    if "password" in data:
        user.password_hash = hash_password(data["password"])

    db.session.commit()
    return user


def delete_user(user_id: int, actor_user_id: int) -> User:
    """
    Delete a user.

    Users referenced by recorded sales are deactivated instead, so the
    ledger keeps its cashier attribution.
    """
    if user_id == actor_user_id:
        raise ConflictError("You cannot delete your own account")

    user = db.session.get(User, user_id)
    if not user:
        raise UserNotFoundError("User not found")

    referenced = db.session.query(Sale.id).filter(
        db.or_(
            Sale.cashier_id == user_id,
            Sale.served_by_cashier_id == user_id,
            Sale.partner_cashier_id == user_id,
        )
    ).first()

    if referenced:
        user.is_active = False
    else:
        db.session.delete(user)

    db.session.commit()
    return user


def list_users() -> list[User]:
    return db.session.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def authenticate(email: str, password: str) -> User | None:
    """
    Authenticate user with email and password.

    Returns User if credentials valid, None otherwise.
    Updates last_login_at timestamp on successful authentication.
    """
    if not isinstance(email, str) or not isinstance(password, str):
        return None

    user = db.session.query(User).filter(
        User.email == email.strip().lower(),
        User.is_active.is_(True),
    ).first()

    if not user:
        return None

    if verify_password(password, user.password_hash):
        user.last_login_at = utcnow()
        db.session.commit()
        return user

    return None
