"""
Member administration tests.

Verifies:
- Create and patch go through the field allowlist
- discord_id and discord_username stay unique
- merit_points cannot be written directly
- Units, dashboard summaries and the seed command
"""

import json

import pytest

from roster.models import AuditLog, User
from roster.services import duty_service, promotion_service, user_service
from roster.services.auth_service import PasswordValidationError
from roster.services.user_service import UserNotFoundError
from roster.validation import ConflictError, ValidationError


NEW_MEMBER = {
    "discord_id": "900000001",
    "discord_username": "soldier_brown",
    "first_name": "Emily",
    "last_name": "Brown",
    "unit": "Bravo Company",
}


class TestUserService:

    def test_create_defaults(self, db_session, admin):
        user = user_service.create_user(actor_id=admin.id, payload=dict(NEW_MEMBER), password="Password123")
        assert (user.rank, user.role, user.status, user.merit_points) == ("PV1", "Soldier", "active", 0)
        assert user.join_date is not None
        assert user.password_hash

        entry = db_session.query(AuditLog).filter_by(action="user_created").one()
        assert entry.performed_by == admin.id
        assert entry.target_resource_id == str(user.id)

    def test_create_without_password(self, db_session):
        user = user_service.create_user(actor_id=None, payload=dict(NEW_MEMBER))
        assert user.password_hash is None

    @pytest.mark.parametrize("overrides", [
        {"rank": "ADM"},
        {"role": "Captain"},
        {"status": "retired"},
        {"merit_points": 500},
        {"password_hash": "x"},
        {"first_name": ""},
    ])
    def test_create_rejects(self, db_session, overrides):
        with pytest.raises(ValidationError):
            user_service.create_user(actor_id=None, payload=dict(NEW_MEMBER, **overrides))
        assert db_session.query(User).count() == 0

    def test_weak_password(self, db_session):
        with pytest.raises(PasswordValidationError):
            user_service.create_user(actor_id=None, payload=dict(NEW_MEMBER), password="short")

    def test_unique_identifiers(self, db_session, soldier):
        with pytest.raises(ConflictError):
            user_service.create_user(actor_id=None, payload=dict(NEW_MEMBER, discord_id=soldier.discord_id))
        with pytest.raises(ConflictError):
            user_service.create_user(actor_id=None, payload=dict(NEW_MEMBER, discord_username="SOLDIER_WILSON"))

    def test_update(self, db_session, admin, soldier):
        user = user_service.update_user(
            actor_id=admin.id, user_id=soldier.id, payload={"callsign": "Alpha-1", "status": "inactive"},
        )
        assert user.callsign == "Alpha-1"
        assert not user.is_active

        entry = db_session.query(AuditLog).filter_by(action="user_updated").one()
        assert json.loads(entry.previous_value)["status"] == "active"
        assert json.loads(entry.new_value) == {"callsign": "Alpha-1", "status": "inactive"}

    def test_update_keeps_own_username(self, db_session, admin, soldier):
        user_service.update_user(actor_id=admin.id, user_id=soldier.id, payload={"discord_username": "soldier_wilson"})

    def test_update_unknown(self, db_session, admin):
        with pytest.raises(UserNotFoundError):
            user_service.update_user(actor_id=admin.id, user_id=9999, payload={"callsign": "X"})

    def test_merit_points_not_writable(self, db_session, admin, soldier):
        with pytest.raises(ValidationError, match="Field not allowed: merit_points"):
            user_service.update_user(actor_id=admin.id, user_id=soldier.id, payload={"merit_points": 100})


class TestUserRoutes:

    def test_create_and_fetch(self, client, db_session, admin_headers):
        resp = client.post("/api/users", json=dict(NEW_MEMBER, password="Password123"), headers=admin_headers)
        assert resp.status_code == 201
        assert resp.json["has_password"] is True
        user_id = resp.json["id"]

        resp = client.get(f"/api/users/{user_id}", headers=admin_headers)
        assert resp.json["discord_username"] == "soldier_brown"

        resp = client.post("/api/auth/login", json={"username": "soldier_brown", "password": "Password123"})
        assert resp.status_code == 200

    def test_duplicate_is_409(self, client, admin_headers, soldier):
        resp = client.post("/api/users", json=dict(NEW_MEMBER, discord_id=soldier.discord_id), headers=admin_headers)
        assert resp.status_code == 409

    def test_patch(self, client, admin_headers, soldier):
        resp = client.patch(f"/api/users/{soldier.id}", json={"unit": "Bravo Company"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["unit"] == "Bravo Company"

        resp = client.patch(f"/api/users/{soldier.id}", json={"merit_points": 10}, headers=admin_headers)
        assert resp.status_code == 400

        assert client.patch("/api/users/9999", json={"unit": "X"}, headers=admin_headers).status_code == 404

    @pytest.mark.parametrize("body", ["x", ["discord_id", "1"], 42])
    def test_non_object_body_is_400(self, client, db_session, admin_headers, body):
        resp = client.post("/api/users", json=body, headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json == {"error": "Request body must be a JSON object"}
        assert db_session.query(User).filter_by(discord_username="x").count() == 0

        resp = client.patch("/api/users/9999", json=body, headers=admin_headers)
        assert resp.status_code == 400

    def test_status_filter(self, client, admin_headers, make_user):
        make_user("retired", status="inactive")
        resp = client.get("/api/users?status=inactive", headers=admin_headers)
        assert [u["discord_username"] for u in resp.json] == ["retired"]


class TestUnits:

    def test_create_and_list(self, client, db_session, admin_headers, colonel, soldier_headers):
        resp = client.post(
            "/api/units",
            json={"name": "2nd Battalion", "abbreviation": "2ND BN", "commander_id": colonel.id},
            headers=admin_headers,
        )
        assert resp.status_code == 201

        resp = client.post("/api/units", json={"name": "2ND BATTALION", "abbreviation": "X"}, headers=admin_headers)
        assert resp.status_code == 409

        resp = client.post(
            "/api/units", json={"name": "3rd Battalion", "abbreviation": "3RD", "commander_id": 9999}, headers=admin_headers,
        )
        assert resp.status_code == 404

        resp = client.get("/api/units", headers=soldier_headers)
        assert [u["name"] for u in resp.json] == ["2nd Battalion"]

    def test_soldier_cannot_create(self, client, soldier_headers):
        resp = client.post("/api/units", json={"name": "Rogue", "abbreviation": "R"}, headers=soldier_headers)
        assert resp.status_code == 403


class TestDashboard:

    def test_stats(self, client, db_session, soldier, general, soldier_headers):
        duty_service.duty_on(user_id=soldier.id)
        promotion_service.promote(user_id=soldier.id, to_rank="PV2", approved_by=general.id)

        resp = client.get("/api/dashboard/stats", headers=soldier_headers)
        assert resp.json == {
            "total_personnel": 2,
            "active_on_duty": 1,
            "recent_promotions": 1,
            "pending_disciplinary": 0,
        }

        resp = client.get("/api/dashboard/activity", headers=soldier_headers)
        assert [(a["type"], a["to_rank"]) for a in resp.json] == [("promotion", "PV2")]

    def test_admin_stats(self, client, admin_headers):
        resp = client.get("/api/admin/stats", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["users"] == 1


class TestSeedCommand:

    def test_seed_once(self, app, db_session):
        runner = app.test_cli_runner()

        result = runner.invoke(args=["system", "seed", "--password", "Password123"])
        assert "PASS Created 8 awards" in result.output
        assert db_session.query(User).count() == 9

        result = runner.invoke(args=["system", "seed"])
        assert "SKIP Database already seeded" in result.output
        assert db_session.query(User).count() == 9
