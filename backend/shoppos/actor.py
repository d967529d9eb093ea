# Overview: Typed identity of the authenticated caller.

from __future__ import annotations

from dataclasses import dataclass

from .permissions import role_has_permission


@dataclass(frozen=True)
class Actor:
    """
    Who is performing an operation.

    Resolved once per request by require_auth; services receive it as a
    plain value and never look at tokens or request headers themselves.
    """
    id: int
    role: str

    def can(self, permission_code: str) -> bool:
        return role_has_permission(self.role, permission_code)
