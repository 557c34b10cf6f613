"""
Audit trail tests.

Verifies:
- Entries are stored with stringified previous/new values
- A failing audit write never undoes or hides the operation it describes
- The /api/audit listing filters and names performers
"""

import json

from sqlalchemy.exc import OperationalError

from roster.models import AuditLog, DutyLog
from roster.services import audit_service, duty_service, record_store


def _broken_sink(**fields):
    raise OperationalError("INSERT INTO audit_logs", {}, Exception("disk I/O error"))


class TestRecord:

    def test_values_are_stringified(self, db_session, soldier):
        entry = audit_service.record(
            soldier.id,
            "user_updated",
            "user",
            soldier.id,
            previous_value={"rank": "PV1", "callsign": None},
            new_value={"rank": "PV2"},
        )
        assert entry.target_resource_id == str(soldier.id)
        assert json.loads(entry.previous_value) == {"rank": "PV1", "callsign": None}
        assert entry.new_value == '{"rank": "PV2"}'

    def test_system_entry(self, db_session):
        entry = audit_service.record(None, "merit_balance_reconciled")
        assert entry.performed_by is None
        assert entry.target_resource_id is None

    def test_failure_is_swallowed(self, db_session, soldier, monkeypatch, caplog):
        monkeypatch.setattr(record_store, "create_audit_log", _broken_sink)

        assert audit_service.record(soldier.id, "duty_started") is None
        assert "Failed to write audit log entry duty_started" in caplog.text

    def test_operation_survives_audit_failure(self, db_session, soldier, monkeypatch):
        monkeypatch.setattr(record_store, "create_audit_log", _broken_sink)

        log = duty_service.duty_on(user_id=soldier.id)
        monkeypatch.undo()

        assert db_session.query(DutyLog).filter_by(id=log.id).one().end_time is None
        assert db_session.query(AuditLog).count() == 0

        # The store is still usable afterwards
        duty_service.duty_off(user_id=soldier.id)
        assert db_session.query(AuditLog).filter_by(action="duty_ended").count() == 1


class TestAuditRoute:

    def test_listing(self, client, db_session, general_headers, general, soldier):
        audit_service.record(soldier.id, "duty_started", "duty_log", 1)
        audit_service.record(None, "merit_balance_reconciled", "user", soldier.id)
        audit_service.record(4242, "duty_ended", "duty_log", 1)

        resp = client.get("/api/audit", headers=general_headers)
        assert resp.status_code == 200
        names = {row["action"]: row["performed_by_name"] for row in resp.json}
        assert names["duty_started"] == "Test Soldier_Wilson"
        assert names["merit_balance_reconciled"] == "System"
        assert names["duty_ended"] == "Unknown"

    def test_filters_and_limit(self, client, db_session, general_headers, soldier):
        for _ in range(3):
            audit_service.record(soldier.id, "duty_started")

        resp = client.get("/api/audit?action=duty_started&limit=2", headers=general_headers)
        assert len(resp.json) == 2

        resp = client.get(f"/api/audit?performed_by={soldier.id}", headers=general_headers)
        assert {row["action"] for row in resp.json} == {"duty_started"}

    def test_newest_first(self, client, db_session, general_headers, soldier):
        audit_service.record(soldier.id, "duty_started")
        audit_service.record(soldier.id, "duty_ended")

        resp = client.get(f"/api/audit?performed_by={soldier.id}", headers=general_headers)
        assert [row["action"] for row in resp.json] == ["duty_ended", "duty_started"]
