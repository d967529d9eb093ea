# Overview: Permission catalogue as (code, name, description, category) tuples.


class PermissionCategory:
    INVENTORY = "INVENTORY"
    SALES = "SALES"
    OFFERS = "OFFERS"
    USERS = "USERS"
    REPORTS = "REPORTS"
    SYSTEM = "SYSTEM"


# -- INVENTORY --

INVENTORY_PERMISSIONS = [
    (
        "VIEW_ITEMS",
        "View Items",
        "View items, prices and on-hand quantities",
        PermissionCategory.INVENTORY,
    ),
    (
        "MANAGE_ITEMS",
        "Manage Items",
        "Create, edit and delete items (including manual quantity changes)",
        PermissionCategory.INVENTORY,
    ),
    (
        "VIEW_LOCATIONS",
        "View Locations",
        "View shop locations",
        PermissionCategory.INVENTORY,
    ),
    (
        "MANAGE_LOCATIONS",
        "Manage Locations",
        "Create, rename and delete shop locations",
        PermissionCategory.INVENTORY,
    ),
]


# -- SALES --

SALES_PERMISSIONS = [
    (
        "CREATE_SALE",
        "Create Sale",
        "Ring up sales at the POS (decrements stock)",
        PermissionCategory.SALES,
    ),
    (
        "VIEW_SALES",
        "View Sales",
        "View sales history and sale details",
        PermissionCategory.SALES,
    ),
]


# -- OFFERS --

OFFER_PERMISSIONS = [
    (
        "CREATE_OFFER",
        "Create Offer",
        "Submit inter-shop transfer offers",
        PermissionCategory.OFFERS,
    ),
    (
        "REVIEW_OFFERS",
        "Review Offers",
        "List, approve and reject transfer offers",
        PermissionCategory.OFFERS,
    ),
]


# -- USERS --

USER_PERMISSIONS = [
    (
        "MANAGE_USERS",
        "Manage Users",
        "Create, edit and delete staff accounts",
        PermissionCategory.USERS,
    ),
]


# -- REPORTS --

REPORT_PERMISSIONS = [
    (
        "VIEW_REPORTS",
        "View Reports",
        "Dashboard, sales, product and cashier reports, CSV export",
        PermissionCategory.REPORTS,
    ),
]


# -- SYSTEM --

SYSTEM_PERMISSIONS = [
    (
        "MANAGE_SETTINGS",
        "Manage Settings",
        "View and change shop settings",
        PermissionCategory.SYSTEM,
    ),
]


# Listing order for `flask perms list`
PERMISSION_DEFINITIONS = (
    INVENTORY_PERMISSIONS
    + SALES_PERMISSIONS
    + OFFER_PERMISSIONS
    + USER_PERMISSIONS
    + REPORT_PERMISSIONS
    + SYSTEM_PERMISSIONS
)
