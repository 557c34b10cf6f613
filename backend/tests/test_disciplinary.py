"""
Disciplinary record tests.

Verifies:
- Category, status and reason length are enforced
- New records start active at version 1; each update bumps the version
- Listings carry the subject's name, "Unknown" when it does not resolve
"""

import json

import pytest

from roster.models import AuditLog, DisciplinaryRecord
from roster.services import disciplinary_service, record_store
from roster.services.disciplinary_service import DisciplinaryRecordNotFoundError
from roster.services.user_service import UserNotFoundError
from roster.time_utils import utcnow
from roster.validation import ValidationError


def _payload(user_id, **overrides):
    payload = {"user_id": user_id, "reason": "Failure to follow orders", "category": "minor"}
    payload.update(overrides)
    return payload


class TestCreateRecord:

    def test_create(self, db_session, soldier, mp):
        record = disciplinary_service.create_record(
            issued_by=mp.id,
            payload=_payload(soldier.id, evidence=["https://example.org/clip"]),
        )
        assert record.status == "active"
        assert record.version == 1
        assert record.issued_by == mp.id
        assert record.evidence == ["https://example.org/clip"]

        entry = db_session.query(AuditLog).filter_by(action="disciplinary_created").one()
        assert entry.new_value == "Failure to follow orders"

    @pytest.mark.parametrize("overrides", [
        {"reason": "Too short"},
        {"category": "catastrophic"},
        {"evidence": "not-a-list"},
        {"evidence": [1, 2]},
        {"status": "closed"},
        {"issued_by": 1},
    ])
    def test_rejects(self, db_session, soldier, mp, overrides):
        with pytest.raises(ValidationError):
            disciplinary_service.create_record(issued_by=mp.id, payload=_payload(soldier.id, **overrides))
        assert db_session.query(DisciplinaryRecord).count() == 0

    def test_missing_fields(self, db_session, soldier, mp):
        with pytest.raises(ValidationError, match="Missing required fields"):
            disciplinary_service.create_record(issued_by=mp.id, payload={"user_id": soldier.id})

    def test_unknown_subject(self, db_session, mp):
        with pytest.raises(UserNotFoundError):
            disciplinary_service.create_record(issued_by=mp.id, payload=_payload(9999))


class TestUpdateRecord:

    def test_version_bumps(self, db_session, soldier, mp):
        record = disciplinary_service.create_record(issued_by=mp.id, payload=_payload(soldier.id))
        created_at = record.updated_at

        record = disciplinary_service.update_record(actor_id=mp.id, record_id=record.id, payload={"status": "appealed"})
        assert record.version == 2
        assert record.updated_at >= created_at

        record = disciplinary_service.update_record(actor_id=mp.id, record_id=record.id, payload={"status": "closed"})
        assert record.version == 3
        assert record.status == "closed"

    def test_update_is_audited(self, db_session, soldier, mp):
        record = disciplinary_service.create_record(issued_by=mp.id, payload=_payload(soldier.id))
        disciplinary_service.update_record(actor_id=mp.id, record_id=record.id, payload={"category": "moderate"})

        entry = db_session.query(AuditLog).filter_by(action="disciplinary_updated").one()
        assert json.loads(entry.previous_value) == {"category": "minor"}
        assert json.loads(entry.new_value) == {"category": "moderate"}

    def test_bad_status(self, db_session, soldier, mp):
        record = disciplinary_service.create_record(issued_by=mp.id, payload=_payload(soldier.id))
        with pytest.raises(ValidationError):
            disciplinary_service.update_record(actor_id=mp.id, record_id=record.id, payload={"status": "pardoned"})

    def test_empty_patch(self, db_session, soldier, mp):
        record = disciplinary_service.create_record(issued_by=mp.id, payload=_payload(soldier.id))
        with pytest.raises(ValidationError):
            disciplinary_service.update_record(actor_id=mp.id, record_id=record.id, payload={})

    def test_unknown_record(self, db_session, mp):
        with pytest.raises(DisciplinaryRecordNotFoundError):
            disciplinary_service.update_record(actor_id=mp.id, record_id=9999, payload={"status": "closed"})


class TestListRecords:

    def test_unknown_subject_name(self, db_session, mp):
        now = utcnow()
        with record_store.transaction():
            record_store.create_disciplinary_record(
                user_id=4242,
                issued_by=mp.id,
                reason="Record for a removed member",
                category="minor",
                status="active",
                date=now,
                created_at=now,
                updated_at=now,
            )
        [row] = disciplinary_service.list_records()
        assert row["user_name"] == "Unknown"

    def test_filters(self, db_session, soldier, mp):
        first = disciplinary_service.create_record(issued_by=mp.id, payload=_payload(soldier.id))
        disciplinary_service.create_record(issued_by=mp.id, payload=_payload(mp.id))
        disciplinary_service.update_record(actor_id=mp.id, record_id=first.id, payload={"status": "closed"})

        assert len(disciplinary_service.list_records(user_id=soldier.id)) == 1
        assert [r["user_id"] for r in disciplinary_service.list_records(status="active")] == [mp.id]


class TestDisciplinaryRoutes:

    def test_create_and_patch(self, client, db_session, mp_headers, soldier):
        resp = client.post("/api/disciplinary", json=_payload(soldier.id), headers=mp_headers)
        assert resp.status_code == 201
        record_id = resp.json["id"]

        resp = client.patch(f"/api/disciplinary/{record_id}", json={"notes": "Reviewed"}, headers=mp_headers)
        assert resp.status_code == 200
        assert resp.json["version"] == 2

        assert client.patch("/api/disciplinary/9999", json={"notes": "x"}, headers=mp_headers).status_code == 404

    def test_short_reason_is_400(self, client, mp_headers, soldier):
        resp = client.post("/api/disciplinary", json=_payload(soldier.id, reason="Short"), headers=mp_headers)
        assert resp.status_code == 400

    def test_soldier_cannot_file(self, client, soldier_headers, soldier):
        resp = client.post("/api/disciplinary", json=_payload(soldier.id), headers=soldier_headers)
        assert resp.status_code == 403

    def test_mine(self, client, soldier, mp, login_as):
        disciplinary_service.create_record(issued_by=mp.id, payload=_payload(soldier.id))
        disciplinary_service.create_record(issued_by=mp.id, payload=_payload(mp.id))

        resp = client.get("/api/disciplinary/mine", headers=login_as(soldier))
        assert resp.status_code == 200
        assert [r["user_id"] for r in resp.json] == [soldier.id]
