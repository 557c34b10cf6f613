# Overview: Service-layer operations for disciplinary records.

"""
Disciplinary Service

WHY: Military police and officers file records against members; records are
later appealed or closed.

RULES:
- category in minor / moderate / severe
- status in active / appealed / closed (new records start active)
- reason must be at least DISCIPLINARY_REASON_MIN_LENGTH characters
- every update bumps version and updated_at; last writer wins
"""

from flask import current_app

from . import audit_service, record_store
from .user_service import get_user_or_404
from ..models import DisciplinaryRecord
from ..validation import (
    NotFoundError,
    ValidationError,
    ModelValidationPolicy,
    validate_payload,
)
from roster.time_utils import utcnow


DISCIPLINARY_CATEGORIES = ("minor", "moderate", "severe")
DISCIPLINARY_STATUSES = ("active", "appealed", "closed")

CREATE_POLICY = ModelValidationPolicy(
    writable_fields={"user_id", "reason", "category", "evidence", "notes", "date"},
    required_on_create={"user_id", "reason", "category"},
)

UPDATE_POLICY = ModelValidationPolicy(
    writable_fields={"reason", "category", "status", "evidence", "notes"},
)


class DisciplinaryRecordNotFoundError(NotFoundError):
    pass


def _enforce_rules(patch: dict) -> None:
    if "category" in patch and patch["category"] not in DISCIPLINARY_CATEGORIES:
        raise ValidationError(f"category must be one of: {', '.join(DISCIPLINARY_CATEGORIES)}")

    if "status" in patch and patch["status"] not in DISCIPLINARY_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(DISCIPLINARY_STATUSES)}")

    if "reason" in patch:
        min_length = current_app.config.get("DISCIPLINARY_REASON_MIN_LENGTH", 10)
        if len(patch["reason"] or "") < min_length:
            raise ValidationError(f"reason must be at least {min_length} characters")

    evidence = patch.get("evidence")
    if evidence is not None and not all(isinstance(link, str) for link in evidence):
        raise ValidationError("evidence must be a list of links")


def create_record(*, issued_by: int, payload: dict) -> DisciplinaryRecord:
    patch = validate_payload(model=DisciplinaryRecord, payload=payload, policy=CREATE_POLICY, partial=False)
    _enforce_rules(patch)
    patch.setdefault("date", utcnow())

    with record_store.transaction():
        get_user_or_404(patch["user_id"])
        now = utcnow()
        record = record_store.create_disciplinary_record(
            issued_by=issued_by,
            status="active",
            created_at=now,
            updated_at=now,
            **patch,
        )
        record_id = record.id

    audit_service.record(issued_by, "disciplinary_created", "disciplinary_record", record_id, new_value=patch["reason"])
    return record


def update_record(*, actor_id: int, record_id: int, payload: dict) -> DisciplinaryRecord:
    patch = validate_payload(model=DisciplinaryRecord, payload=payload, policy=UPDATE_POLICY, partial=True)
    _enforce_rules(patch)
    if not patch:
        raise ValidationError("No fields to update")

    with record_store.transaction():
        record = record_store.get_disciplinary_record(record_id)
        if not record:
            raise DisciplinaryRecordNotFoundError("Disciplinary record not found")
        previous = {k: getattr(record, k) for k in patch}
        patch["updated_at"] = utcnow()
        # version is bumped by the mapper on flush
        record_store.update_disciplinary_record(record, patch)

    audit_service.record(
        actor_id,
        "disciplinary_updated",
        "disciplinary_record",
        record_id,
        previous_value=previous,
        new_value={k: v for k, v in patch.items() if k != "updated_at"},
    )
    return record


def list_records(*, user_id: int | None = None, status: str | None = None) -> list[dict]:
    """Records with the subject's display name ("Unknown" when unresolved)."""
    names = record_store.get_user_names()
    result = []
    for record in record_store.list_disciplinary_records(user_id=user_id, status=status):
        data = record.to_dict()
        data["user_name"] = names.get(record.user_id, "Unknown")
        result.append(data)
    return result


def has_active_severe(user_id: int) -> bool:
    return any(
        record.category == "severe"
        for record in record_store.list_disciplinary_records(user_id=user_id, status="active")
    )
