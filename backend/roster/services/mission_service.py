# Overview: Service-layer operations for mission reports.

"""
Missions are create-only reports. merit_points_awarded is recorded on the
mission as reported; it does not write merit ledger rows.
"""

from . import audit_service, record_store
from ..models import Mission
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_mission
from roster.time_utils import utcnow


MISSION_POLICY = ModelValidationPolicy(
    writable_fields={
        "title",
        "mission_code",
        "description",
        "participants",
        "duration",
        "outcome",
        "merit_points_awarded",
        "notes",
    },
    required_on_create={"title", "mission_code", "description", "outcome"},
)


def create_mission(*, commander_id: int, payload: dict) -> Mission:
    patch = validate_payload(model=Mission, payload=payload, policy=MISSION_POLICY, partial=False)
    enforce_rules_mission(patch)

    patch.setdefault("participants", [])
    patch.setdefault("duration", 0)
    patch.setdefault("merit_points_awarded", 0)

    with record_store.transaction():
        mission = record_store.create_mission(commander_id=commander_id, date=utcnow(), **patch)
        mission_id = mission.id

    audit_service.record(commander_id, "mission_created", "mission", mission_id, new_value=patch["title"])
    return mission


def list_missions() -> list[dict]:
    names = record_store.get_user_names()
    result = []
    for mission in record_store.list_missions():
        data = mission.to_dict()
        data["commander_name"] = names.get(mission.commander_id, "Unknown")
        result.append(data)
    return result
