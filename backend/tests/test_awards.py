"""
Award tests.

Verifies:
- The same award can be granted to a member more than once
- Revocation deletes the grant and records the prior row
- Revoking an unknown grant is a 404 with no audit entry
"""

import json

import pytest

from roster.models import AuditLog, UserAward
from roster.services import award_service
from roster.services.award_service import AwardNotFoundError, UserAwardNotFoundError
from roster.validation import ConflictError, ValidationError


@pytest.fixture
def medal(db_session):
    return award_service.create_award({
        "name": "Army Achievement Medal",
        "abbreviation": "AAM",
        "category": "medal",
        "precedence": 30,
    })


class TestAwardService:

    def test_duplicate_catalogue_entry(self, db_session, medal):
        with pytest.raises(ConflictError):
            award_service.create_award({
                "name": "Army Achievement Medal",
                "abbreviation": "AAM",
                "category": "medal",
                "precedence": 31,
            })

    def test_grant_twice(self, db_session, soldier, general, medal):
        first = award_service.grant(user_id=soldier.id, awarded_by=general.id, payload={"award_id": medal.id})
        second = award_service.grant(
            user_id=soldier.id,
            awarded_by=general.id,
            payload={"award_id": medal.id, "oak_leaf_clusters": 1, "citation": "Second patrol"},
        )
        assert first.id != second.id

        listed = award_service.list_user_awards(soldier.id)
        assert [row["oak_leaf_clusters"] for row in listed] == [0, 1]
        assert listed[0]["award"]["abbreviation"] == "AAM"
        assert db_session.query(AuditLog).filter_by(action="award_granted").count() == 2

    def test_grant_unknown_award(self, db_session, soldier, general):
        with pytest.raises(AwardNotFoundError):
            award_service.grant(user_id=soldier.id, awarded_by=general.id, payload={"award_id": 9999})

    def test_grant_bad_clusters(self, db_session, soldier, general, medal):
        with pytest.raises(ValidationError):
            award_service.grant(
                user_id=soldier.id,
                awarded_by=general.id,
                payload={"award_id": medal.id, "oak_leaf_clusters": -1},
            )

    def test_revoke(self, db_session, soldier, general, medal):
        user_award = award_service.grant(user_id=soldier.id, awarded_by=general.id, payload={"award_id": medal.id})
        user_award_id = user_award.id

        previous = award_service.revoke(user_award_id=user_award_id, revoked_by=general.id)
        assert previous["award_id"] == medal.id
        assert db_session.query(UserAward).count() == 0

        entry = db_session.query(AuditLog).filter_by(action="award_revoked").one()
        assert entry.target_resource_id == str(user_award_id)
        assert json.loads(entry.previous_value)["user_id"] == soldier.id

    def test_revoke_unknown_is_not_audited(self, db_session, general):
        with pytest.raises(UserAwardNotFoundError):
            award_service.revoke(user_award_id=9999, revoked_by=general.id)
        assert db_session.query(AuditLog).filter_by(action="award_revoked").count() == 0


class TestAwardRoutes:

    def test_grant_and_revoke(self, client, db_session, general_headers, soldier, medal):
        resp = client.post(f"/api/users/{soldier.id}/awards", json={"award_id": medal.id}, headers=general_headers)
        assert resp.status_code == 201
        user_award_id = resp.json["id"]

        resp = client.get(f"/api/users/{soldier.id}/awards", headers=general_headers)
        assert len(resp.json) == 1

        resp = client.delete(f"/api/user-awards/{user_award_id}", headers=general_headers)
        assert resp.status_code == 200
        assert resp.json["success"] is True

        resp = client.delete(f"/api/user-awards/{user_award_id}", headers=general_headers)
        assert resp.status_code == 404
        assert db_session.query(AuditLog).filter_by(action="award_revoked").count() == 1

    def test_unknown_member_is_404(self, client, general_headers, medal):
        resp = client.post("/api/users/9999/awards", json={"award_id": medal.id}, headers=general_headers)
        assert resp.status_code == 404

    def test_missing_award_id_is_400(self, client, general_headers, soldier):
        resp = client.post(f"/api/users/{soldier.id}/awards", json={}, headers=general_headers)
        assert resp.status_code == 400

    def test_soldier_cannot_grant(self, client, soldier_headers, soldier, medal):
        resp = client.post(f"/api/users/{soldier.id}/awards", json={"award_id": medal.id}, headers=soldier_headers)
        assert resp.status_code == 403

    def test_catalogue_is_visible(self, client, soldier_headers, medal):
        resp = client.get("/api/awards", headers=soldier_headers)
        assert [a["name"] for a in resp.json] == ["Army Achievement Medal"]
