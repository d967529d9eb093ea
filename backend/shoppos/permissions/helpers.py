# Overview: Lookups over the permission catalogue and the role grants.

from .definitions import PERMISSION_DEFINITIONS
from .roles import DEFAULT_ROLE_PERMISSIONS


_BY_CODE = {code: (code, name, description, category) for code, name, description, category in PERMISSION_DEFINITIONS}


def get_all_permission_codes():
    return list(_BY_CODE)


def get_permissions_by_category(category):
    """Definition tuples whose category matches, in catalogue order."""
    return [perm for perm in PERMISSION_DEFINITIONS if perm[3] == category]


def get_permission_definition(code):
    """Definition of `code` as a dict, or None for an unknown code."""
    perm = _BY_CODE.get(code)
    if perm is None:
        return None
    return dict(zip(("code", "name", "description", "category"), perm))


def validate_permission_code(code):
    return code in _BY_CODE


def get_role_permissions(role):
    """Permission codes granted to a role (empty for unknown roles)."""
    return DEFAULT_ROLE_PERMISSIONS.get(role, frozenset())


def role_has_permission(role, code):
    return code in get_role_permissions(role)
