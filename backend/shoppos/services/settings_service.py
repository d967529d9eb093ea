# Overview: Service-layer operations for shop settings; a single row, created on first write.

from __future__ import annotations

from ..extensions import db
from ..models import ShopSettings
from ..models.settings import DEFAULT_SHOP_SETTINGS
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_settings,
    validate_payload,
)
from .concurrency import run_with_retry


SETTINGS_POLICY = ModelValidationPolicy(
    writable_fields=set(DEFAULT_SHOP_SETTINGS.keys()),
)


def _current() -> ShopSettings | None:
    return db.session.query(ShopSettings).order_by(ShopSettings.id.desc()).first()


def get_settings() -> dict:
    """Stored settings, or the defaults when nothing has been saved yet."""
    settings = _current()
    if settings is None:
        return dict(DEFAULT_SHOP_SETTINGS)
    return settings.to_dict()


def update_settings(payload: dict) -> ShopSettings:
    """
    Partially update settings; the first write creates the row, filling
    unspecified fields from the defaults.
    """
    patch = validate_payload(model=ShopSettings, payload=payload, policy=SETTINGS_POLICY, partial=True)
    if not patch:
        raise ValidationError("No fields to update")
    enforce_rules_settings(patch)

    def _op():
        settings = _current()
        if settings is None:
            values = dict(DEFAULT_SHOP_SETTINGS)
            values.update(patch)
            settings = ShopSettings(**values)
            db.session.add(settings)
        else:
            for key, value in patch.items():
                setattr(settings, key, value)
        db.session.commit()
        return settings

    return run_with_retry(_op)
