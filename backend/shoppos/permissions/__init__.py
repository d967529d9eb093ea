# Overview: Static role-based permissions; admin holds everything, cashier a fixed subset.

from .definitions import PERMISSION_DEFINITIONS, PermissionCategory
from .roles import DEFAULT_ROLE_PERMISSIONS
from .helpers import (
    get_all_permission_codes,
    get_permission_definition,
    get_permissions_by_category,
    get_role_permissions,
    role_has_permission,
    validate_permission_code,
)

__all__ = [
    "DEFAULT_ROLE_PERMISSIONS",
    "PERMISSION_DEFINITIONS",
    "PermissionCategory",
    "get_all_permission_codes",
    "get_permission_definition",
    "get_permissions_by_category",
    "get_role_permissions",
    "role_has_permission",
    "validate_permission_code",
]
