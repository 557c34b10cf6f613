# Overview: Service-layer operations for units.

from . import audit_service, record_store
from ..models import Unit
from ..validation import ConflictError, ModelValidationPolicy, validate_payload
from .user_service import get_user_or_404


UNIT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "abbreviation", "commander_id", "description"},
    required_on_create={"name", "abbreviation"},
)


def create_unit(*, actor_id: int | None, payload: dict) -> Unit:
    patch = validate_payload(model=Unit, payload=payload, policy=UNIT_POLICY, partial=False)

    with record_store.transaction():
        if record_store.get_unit_by_name(patch["name"]):
            raise ConflictError("Unit name already exists")
        if patch.get("commander_id") is not None:
            get_user_or_404(patch["commander_id"])
        unit = record_store.create_unit(**patch)
        unit_id, unit_name = unit.id, unit.name

    audit_service.record(actor_id, "unit_created", "unit", unit_id, new_value=unit_name)
    return unit


def list_units() -> list[Unit]:
    return record_store.list_units()
