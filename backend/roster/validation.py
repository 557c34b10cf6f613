from __future__ import annotations
from datetime import datetime
from roster.time_utils import parse_iso_datetime

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text, DateTime, JSON
from sqlalchemy.orm import DeclarativeMeta

from roster.ranks import is_valid_rank
from roster.permissions import USER_ROLES


USER_STATUSES = ("active", "inactive")
MISSION_OUTCOMES = ("success", "partial", "failed")

# Signed 64-bit, the widest INTEGER SQLite and Postgres store
INTEGER_MIN = -(2 ** 63)
INTEGER_MAX = 2 ** 63 - 1


class ValidationError(ValueError):
    """400-level input problem."""


class NotFoundError(LookupError):
    """404-level problem: an entity id does not resolve."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., already on duty)."""


def is_storable_int(value: Any) -> bool:
    """A real int (not bool) that fits an INTEGER column."""
    return isinstance(value, int) and not isinstance(value, bool) and INTEGER_MIN <= value <= INTEGER_MAX


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            if not is_storable_int(value):
                raise ValidationError(f"{col.key} is out of range")
            return value
        # String input - must be plain digits (with optional leading minus)
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{col.key} must be an integer")
            if 'e' in stripped.lower():
                raise ValidationError(f"{col.key} must be a plain integer (scientific notation not allowed)")
            if '.' in stripped:
                raise ValidationError(f"{col.key} must be an integer (no decimals)")
            try:
                value = int(stripped)
            except ValueError:
                raise ValidationError(f"{col.key} must be an integer")
            if not is_storable_int(value):
                raise ValidationError(f"{col.key} is out of range")
            return value
        if isinstance(value, float):
            raise ValidationError(f"{col.key} must be an integer, not a decimal")
        raise ValidationError(f"{col.key} must be an integer")

    # Booleans
    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        raise ValidationError(f"{col.key} must be a boolean")

    # Datetimes (accept ISO-8601 strings; normalize to UTC)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime")
            if dt is None:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime")
            return dt
        raise ValidationError(f"{col.key} must be a datetime")

    # JSON list columns (participants, evidence links)
    if isinstance(coltype, JSON):
        if not isinstance(value, list):
            raise ValidationError(f"{col.key} must be a list")
        return value

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if payload.get(f) in (None, ""))
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def enforce_rules_user(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    if "rank" in patch and not is_valid_rank(patch["rank"]):
        raise ValidationError(f"rank must be one of the rank table codes, got {patch['rank']!r}")

    if "role" in patch and patch["role"] not in USER_ROLES:
        raise ValidationError(f"role must be one of: {', '.join(USER_ROLES)}")

    if "status" in patch and patch["status"] not in USER_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(USER_STATUSES)}")


def enforce_rules_mission(patch: dict) -> None:
    if "outcome" in patch and patch["outcome"] not in MISSION_OUTCOMES:
        raise ValidationError(f"outcome must be one of: {', '.join(MISSION_OUTCOMES)}")

    if "duration" in patch and patch["duration"] is not None and patch["duration"] < 0:
        raise ValidationError("duration must be >= 0")

    participants = patch.get("participants")
    if participants is not None:
        for participant in participants:
            if isinstance(participant, bool) or not isinstance(participant, int):
                raise ValidationError("participants must be a list of user ids")


def enforce_rules_user_award(patch: dict) -> None:
    clusters = patch.get("oak_leaf_clusters")
    if clusters is not None and clusters < 0:
        raise ValidationError("oak_leaf_clusters must be >= 0")
