# Overview: Permission code lookups.

from .definitions import PERMISSION_DEFINITIONS


def get_all_permission_codes():
    """Get list of all permission codes."""
    return [perm[0] for perm in PERMISSION_DEFINITIONS]
