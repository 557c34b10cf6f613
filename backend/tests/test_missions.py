"""
Mission report tests.
"""

import pytest

from roster.models import AuditLog, MeritPointTransaction
from roster.services import mission_service
from roster.validation import ValidationError


MISSION = {
    "title": "Operation Nightfall",
    "mission_code": "OP-001",
    "description": "Night patrol of the northern sector",
    "outcome": "success",
}


class TestMissionService:

    def test_create_with_defaults(self, db_session, colonel):
        mission = mission_service.create_mission(commander_id=colonel.id, payload=dict(MISSION))
        assert mission.commander_id == colonel.id
        assert mission.participants == []
        assert mission.duration == 0
        assert mission.merit_points_awarded == 0

        entry = db_session.query(AuditLog).filter_by(action="mission_created").one()
        assert entry.new_value == "Operation Nightfall"

    def test_reported_points_do_not_touch_ledger(self, db_session, colonel, soldier):
        mission_service.create_mission(
            commander_id=colonel.id,
            payload=dict(MISSION, participants=[soldier.id], merit_points_awarded=25),
        )
        db_session.refresh(soldier)
        assert soldier.merit_points == 0
        assert db_session.query(MeritPointTransaction).count() == 0

    @pytest.mark.parametrize("overrides", [
        {"outcome": "victory"},
        {"duration": -5},
        {"participants": ["soldier_wilson"]},
        {"commander_id": 1},
        {"title": ""},
    ])
    def test_rejects(self, db_session, colonel, overrides):
        with pytest.raises(ValidationError):
            mission_service.create_mission(commander_id=colonel.id, payload=dict(MISSION, **overrides))

    def test_list_has_commander_name(self, db_session, colonel):
        mission_service.create_mission(commander_id=colonel.id, payload=dict(MISSION))
        [row] = mission_service.list_missions()
        assert row["commander_name"] == "Test Col_Davis"


class TestMissionRoutes:

    def test_create_and_list(self, client, db_session, colonel_headers):
        resp = client.post("/api/missions", json=MISSION, headers=colonel_headers)
        assert resp.status_code == 201
        assert resp.json["mission_code"] == "OP-001"

        resp = client.get("/api/missions", headers=colonel_headers)
        assert [m["title"] for m in resp.json] == ["Operation Nightfall"]

    def test_bad_outcome_is_400(self, client, colonel_headers):
        resp = client.post("/api/missions", json=dict(MISSION, outcome="draw"), headers=colonel_headers)
        assert resp.status_code == 400

    def test_mp_cannot_file(self, client, mp_headers):
        assert client.post("/api/missions", json=MISSION, headers=mp_headers).status_code == 403
