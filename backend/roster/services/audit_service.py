# Overview: Service-layer operations for the audit trail.

"""
Audit Recorder

WHY: Every mutating operation leaves a trace of who did what, with the
previous and new value where something was overwritten.

DESIGN:
- Best-effort: record() never raises. A broken audit sink is logged to the
  application logger and the entry is dropped.
- Called after the primary transaction has committed, in its own
  transaction, so an audit failure can neither roll back nor mask the
  outcome of the operation it describes.
"""

import json

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from . import record_store
from ..models import AuditLog
from roster.time_utils import utcnow


def to_audit_value(value) -> str | None:
    """Render a previous/new value as a string (dicts and lists as JSON)."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, default=str)


def record(
    performed_by: int | None,
    action: str,
    target_type: str | None = None,
    target_id=None,
    previous_value=None,
    new_value=None,
    details: dict | None = None,
) -> AuditLog | None:
    """
    Append an audit entry.

    Returns the entry, or None if it could not be written.

    action examples:
    - user_login / failed_login_attempt
    - duty_started / duty_ended
    - promotion_approved
    - merit_points_awarded
    - award_granted / award_revoked
    """
    try:
        with record_store.transaction():
            entry = record_store.create_audit_log(
                action=action,
                performed_by=performed_by,
                target_resource_type=target_type,
                target_resource_id=str(target_id) if target_id is not None else None,
                previous_value=to_audit_value(previous_value),
                new_value=to_audit_value(new_value),
                details=details,
                timestamp=utcnow(),
            )
        return entry
    except (SQLAlchemyError, TypeError, ValueError):
        current_app.logger.exception("Failed to write audit log entry %s", action)
        return None


def list_entries(*, action: str | None = None, performed_by: int | None = None, limit: int = 500) -> list[dict]:
    """Audit entries newest first, with the performer's display name."""
    names = record_store.get_user_names()
    result = []
    for entry in record_store.list_audit_logs(action=action, performed_by=performed_by, limit=limit):
        data = entry.to_dict()
        data["performed_by_name"] = names.get(entry.performed_by, "Unknown") if entry.performed_by else "System"
        result.append(data)
    return result
