# Overview: Service-layer operations for permission checks.

"""
Authorization Guard

WHY: Every protected operation asks one question: may this caller do this?
The answer comes from the static role table in roster.permissions.

DESIGN PRINCIPLES:
- Fail closed: unknown roles and unknown permission codes grant nothing
- Pure check: no writes, no side effects
"""

from ..models import User
from ..permissions import ROLE_PERMISSIONS


FORBIDDEN_MESSAGE = "Insufficient permissions"


class UnauthenticatedError(Exception):
    """Raised when there is no valid caller."""
    pass


class PermissionDeniedError(Exception):
    """Raised when the caller's role lacks the required permission."""
    pass


def get_role_permissions(role: str | None) -> frozenset[str]:
    """Permission codes granted to a role (empty for unknown roles)."""
    if role is None:
        return frozenset()
    return ROLE_PERMISSIONS.get(role, frozenset())


def user_has_permission(user: User | None, permission_code: str) -> bool:
    if user is None:
        return False
    return permission_code in get_role_permissions(user.role)


def user_has_any_permission(user: User | None, permission_codes) -> bool:
    return any(user_has_permission(user, code) for code in permission_codes)


def check_permission(user: User | None, permission_code: str) -> None:
    """
    Raise unless the caller holds the permission.

    Raises:
        UnauthenticatedError: no caller
        PermissionDeniedError: caller's role lacks the permission
    """
    if user is None:
        raise UnauthenticatedError("Authentication required")
    if not user_has_permission(user, permission_code):
        raise PermissionDeniedError(FORBIDDEN_MESSAGE)
