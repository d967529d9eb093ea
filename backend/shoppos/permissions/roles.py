# Overview: Default permission sets per role.

from .definitions import PERMISSION_DEFINITIONS


# Admin can do everything
ADMIN_PERMISSIONS = frozenset(perm[0] for perm in PERMISSION_DEFINITIONS)

CASHIER_PERMISSIONS = frozenset({
    "VIEW_ITEMS",
    "VIEW_LOCATIONS",
    "CREATE_SALE",
    "VIEW_SALES",
    "CREATE_OFFER",
})

DEFAULT_ROLE_PERMISSIONS = {
    "admin": ADMIN_PERMISSIONS,
    "cashier": CASHIER_PERMISSIONS,
}
