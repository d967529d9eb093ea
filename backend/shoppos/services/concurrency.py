# Overview: Row locks and bounded retry for writes that can safely be repeated.

from __future__ import annotations

import time
from typing import Callable, TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db


T = TypeVar("T")

RETRYABLE_ERRORS = (OperationalError, StaleDataError)


def lock_for_update(query):
    """SELECT ... FOR UPDATE on backends that honor it (SQLite silently does not)."""
    return query.with_for_update()


def run_with_retry(func: Callable[[], T], *, attempts: int = 3, backoff_base: float = 0.1) -> T:
    """
    Call func, rolling back and retrying on lock or stale-row errors.

    Waits backoff_base * 2**n between tries and re-raises the last error
    once attempts are used up. Used for offer review and settings writes;
    sale processing never goes through here.
    """
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except RETRYABLE_ERRORS:
            db.session.rollback()
            if attempt == attempts:
                raise
            time.sleep(backoff_base * (2 ** (attempt - 1)))
    raise ValueError("attempts must be >= 1")
