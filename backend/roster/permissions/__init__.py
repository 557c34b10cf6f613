# Overview: Permission system package.
# Re-exports all public APIs so callers import from roster.permissions.

from .categories import PermissionCategory
from .definitions import (
    PERMISSION_DEFINITIONS,
    PERSONNEL_PERMISSIONS,
    DUTY_PERMISSIONS,
    DISCIPLINARY_PERMISSIONS,
    PROMOTION_PERMISSIONS,
    MERIT_PERMISSIONS,
    REPORT_PERMISSIONS,
    ADMINISTRATION_PERMISSIONS,
    AUDIT_PERMISSIONS,
)
from .roles import USER_ROLES, ROLE_PERMISSIONS
from .helpers import (
    get_all_permission_codes,
)

__all__ = [
    "PermissionCategory",
    "PERMISSION_DEFINITIONS",
    "PERSONNEL_PERMISSIONS",
    "DUTY_PERMISSIONS",
    "DISCIPLINARY_PERMISSIONS",
    "PROMOTION_PERMISSIONS",
    "MERIT_PERMISSIONS",
    "REPORT_PERMISSIONS",
    "ADMINISTRATION_PERMISSIONS",
    "AUDIT_PERMISSIONS",
    "USER_ROLES",
    "ROLE_PERMISSIONS",
    "get_all_permission_codes",
]
