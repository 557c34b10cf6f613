# Overview: Service-layer operations for awards and decorations.

"""
Award Service

WHY: Members receive decorations from the award catalogue. Granting the same
award twice is allowed (each grant is its own row). Revocation hard-deletes
the grant; the audit entry keeps the full prior row.
"""

from . import audit_service, record_store
from .user_service import get_user_or_404
from ..models import Award, UserAward
from ..validation import (
    ConflictError,
    NotFoundError,
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_user_award,
)
from roster.time_utils import utcnow


class AwardNotFoundError(NotFoundError):
    pass


class UserAwardNotFoundError(NotFoundError):
    pass


AWARD_POLICY = ModelValidationPolicy(
    writable_fields={"name", "abbreviation", "category", "precedence", "description"},
    required_on_create={"name", "abbreviation", "category", "precedence"},
)

GRANT_POLICY = ModelValidationPolicy(
    writable_fields={"award_id", "date_awarded", "oak_leaf_clusters", "v_device", "c_device", "citation"},
    required_on_create={"award_id"},
)


def create_award(payload: dict) -> Award:
    """Add an award to the catalogue (used by seeding)."""
    patch = validate_payload(model=Award, payload=payload, policy=AWARD_POLICY, partial=False)
    with record_store.transaction():
        if record_store.get_award_by_name(patch["name"]):
            raise ConflictError("Award already exists")
        award = record_store.create_award(**patch)
    return award


def list_awards() -> list[Award]:
    return record_store.list_awards()


def list_user_awards(user_id: int) -> list[dict]:
    result = []
    for user_award in record_store.list_user_awards(user_id=user_id):
        data = user_award.to_dict()
        data["award"] = user_award.award.to_dict() if user_award.award else None
        result.append(data)
    return result


def grant(*, user_id: int, awarded_by: int, payload: dict) -> UserAward:
    patch = validate_payload(model=UserAward, payload=payload, policy=GRANT_POLICY, partial=False)
    enforce_rules_user_award(patch)

    patch.setdefault("date_awarded", utcnow())
    patch.setdefault("oak_leaf_clusters", 0)
    patch.setdefault("v_device", False)
    patch.setdefault("c_device", False)

    with record_store.transaction():
        get_user_or_404(user_id)
        if not record_store.get_award(patch["award_id"]):
            raise AwardNotFoundError("Award not found")
        user_award = record_store.create_user_award(user_id=user_id, awarded_by=awarded_by, **patch)
        user_award_id = user_award.id

    audit_service.record(
        awarded_by,
        "award_granted",
        "user_award",
        user_award_id,
        new_value={"user_id": user_id, "award_id": patch["award_id"]},
    )
    return user_award


def revoke(*, user_award_id: int, revoked_by: int) -> dict:
    """
    Hard-delete a grant. Returns the deleted row.

    Raises UserAwardNotFoundError (and writes no audit entry) if absent.
    """
    with record_store.transaction():
        user_award = record_store.get_user_award(user_award_id)
        if not user_award:
            raise UserAwardNotFoundError("User award not found")
        previous = user_award.to_dict()
        record_store.delete_user_award(user_award)

    audit_service.record(revoked_by, "award_revoked", "user_award", user_award_id, previous_value=previous)
    return previous
