# Overview: Service-layer operations for members (user administration).

"""
User Administration Service

WHY: Administrators create members, edit their profile and reset passwords.
Members are never hard-deleted; status "inactive" takes them off the roster.

SECURITY NOTES:
- Writable fields are an allowlist; merit_points and password_hash are
  never client-writable (merit goes through the ledger, passwords through
  reset_password)
- Rank, role and status are checked against the static tables
- discord_id and discord_username are unique (username case-insensitively)
"""

from datetime import datetime

from . import audit_service, record_store, session_service
from .auth_service import hash_password
from ..models import User
from ..validation import (
    ConflictError,
    NotFoundError,
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_user,
)
from roster.time_utils import utcnow, to_utc_z


class UserNotFoundError(NotFoundError):
    pass


PROFILE_FIELDS = {
    "discord_id",
    "discord_username",
    "roblox_user_id",
    "roblox_username",
    "first_name",
    "last_name",
    "callsign",
    "rank",
    "role",
    "unit",
    "mos",
    "status",
    "join_date",
}

USER_POLICY = ModelValidationPolicy(
    writable_fields=PROFILE_FIELDS,
    required_on_create={"discord_id", "discord_username", "first_name", "last_name", "unit"},
)


def _jsonable(patch: dict) -> dict:
    return {k: to_utc_z(v) if isinstance(v, datetime) else v for k, v in patch.items()}


def get_user_or_404(user_id: int, *, for_update: bool = False) -> User:
    user = record_store.get_user(user_id, for_update=for_update)
    if not user:
        raise UserNotFoundError("User not found")
    return user


def _check_unique(patch: dict, *, exclude_id: int | None = None) -> None:
    if "discord_id" in patch:
        other = record_store.get_user_by_discord_id(patch["discord_id"])
        if other and other.id != exclude_id:
            raise ConflictError("discord_id already in use")
    if "discord_username" in patch:
        other = record_store.find_user_by_username(patch["discord_username"])
        if other and other.id != exclude_id:
            raise ConflictError("discord_username already in use")


def create_user(*, actor_id: int | None, payload: dict, password: str | None = None) -> User:
    """
    Create a member.

    Raises ValidationError for bad fields, ConflictError for duplicate
    discord id/username, PasswordValidationError for a weak password.
    """
    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=False)
    enforce_rules_user(patch)
    patch.setdefault("join_date", utcnow())

    password_hash = hash_password(password) if password else None

    with record_store.transaction():
        _check_unique(patch)
        user = record_store.create_user(merit_points=0, password_hash=password_hash, **patch)
        user_id = user.id

    audit_service.record(actor_id, "user_created", "user", user_id)
    return user


def update_user(*, actor_id: int, user_id: int, payload: dict) -> User:
    """Patch a member's profile. Audits the full previous row and the patch."""
    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=True)
    enforce_rules_user(patch)

    with record_store.transaction():
        user = get_user_or_404(user_id)
        previous = user.to_dict()
        _check_unique(patch, exclude_id=user.id)
        record_store.update_user(user, patch)

    audit_service.record(
        actor_id,
        "user_updated",
        "user",
        user_id,
        previous_value=previous,
        new_value=_jsonable(patch),
    )
    return user


def reset_password(*, actor_id: int, user_id: int, new_password: str) -> User:
    """
    Set a member's password and sign them out everywhere.

    Raises PasswordValidationError for a weak password.
    """
    password_hash = hash_password(new_password)

    with record_store.transaction():
        user = get_user_or_404(user_id)
        record_store.update_user(user, {"password_hash": password_hash})

    session_service.revoke_all_user_sessions(user_id, reason="Password reset")
    audit_service.record(actor_id, "password_reset", "user", user_id)
    return user


def list_users(*, status: str | None = None) -> list[User]:
    return record_store.list_users(status=status)
