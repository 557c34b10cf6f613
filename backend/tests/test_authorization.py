"""
Authorization tests.

Verifies:
- The role table grants exactly the listed permissions, with no
  inheritance between roles
- Unauthenticated requests return 401
- Missing permissions return 403 with "Insufficient permissions"
- Roles holding a permission get through
"""

import pytest

from roster.permissions import ROLE_PERMISSIONS, USER_ROLES, get_all_permission_codes
from roster.services import permission_service
from roster.services.permission_service import PermissionDeniedError, UnauthenticatedError


EXPECTED_ROLE_PERMISSIONS = {
    "Soldier": {
        "view_own_profile", "view_own_duty", "view_own_disciplinary",
        "view_own_promotions", "duty_on_off",
    },
    "MP": {
        "view_own_profile", "view_own_duty", "view_all_disciplinary",
        "create_disciplinary", "update_disciplinary", "revoke_disciplinary",
        "view_unit_reports", "duty_on_off",
    },
    "Colonel": {
        "view_own_profile", "view_own_duty", "view_all_disciplinary",
        "create_disciplinary", "update_disciplinary", "revoke_disciplinary",
        "view_unit_reports", "view_all_reports", "duty_on_off",
    },
    "General": {
        "view_own_profile", "view_own_duty", "view_all_disciplinary",
        "create_disciplinary", "update_disciplinary", "revoke_disciplinary",
        "promote", "demote", "view_all_reports", "manage_merit_points",
        "override_disciplinary", "view_audit_logs", "duty_on_off",
    },
    "Admin": {
        "manage_users", "manage_roles_map", "manage_units", "export_import_json",
        "configure_bot", "view_audit_logs", "view_all_reports", "view_all_disciplinary",
    },
}


class _Member:
    def __init__(self, role):
        self.role = role


# =============================================================================
# ROLE TABLE
# =============================================================================


class TestRoleTable:

    def test_roles(self):
        assert set(USER_ROLES) == set(EXPECTED_ROLE_PERMISSIONS)
        assert set(ROLE_PERMISSIONS) == set(EXPECTED_ROLE_PERMISSIONS)

    @pytest.mark.parametrize("role", sorted(EXPECTED_ROLE_PERMISSIONS))
    @pytest.mark.parametrize("code", sorted(get_all_permission_codes()))
    def test_every_role_permission_pair(self, role, code):
        expected = code in EXPECTED_ROLE_PERMISSIONS[role]
        assert permission_service.user_has_permission(_Member(role), code) is expected

    def test_every_granted_code_is_defined(self):
        defined = set(get_all_permission_codes())
        for codes in ROLE_PERMISSIONS.values():
            assert codes <= defined

    def test_admin_does_not_inherit_general(self):
        assert "promote" not in ROLE_PERMISSIONS["Admin"]
        assert "manage_users" not in ROLE_PERMISSIONS["General"]

    def test_unknown_role_gets_nothing(self):
        assert permission_service.get_role_permissions("Captain") == frozenset()
        assert not permission_service.user_has_permission(_Member(None), "view_own_profile")

    def test_check_permission(self):
        permission_service.check_permission(_Member("General"), "promote")

        with pytest.raises(PermissionDeniedError, match="Insufficient permissions"):
            permission_service.check_permission(_Member("Soldier"), "promote")

        with pytest.raises(UnauthenticatedError):
            permission_service.check_permission(None, "promote")


# =============================================================================
# UNAUTHENTICATED ACCESS (401)
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/me"),
            ("POST", "/api/auth/logout"),
            ("GET", "/api/users"),
            ("GET", "/api/users/me"),
            ("GET", "/api/duty/current"),
            ("POST", "/api/duty/on"),
            ("GET", "/api/disciplinary"),
            ("POST", "/api/promotions"),
            ("GET", "/api/merit-points"),
            ("POST", "/api/merit-points"),
            ("GET", "/api/missions"),
            ("GET", "/api/units"),
            ("GET", "/api/awards"),
            ("DELETE", "/api/user-awards/1"),
            ("GET", "/api/audit"),
            ("GET", "/api/admin/export"),
            ("GET", "/api/dashboard/stats"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_garbage_token(self, client, db_session):
        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 401


# =============================================================================
# FORBIDDEN (403)
# =============================================================================


class TestForbidden:

    def test_soldier_cannot_promote(self, client, soldier_headers, soldier):
        resp = client.post(
            "/api/promotions",
            json={"user_id": soldier.id, "to_rank": "SPC"},
            headers=soldier_headers,
        )
        assert resp.status_code == 403
        assert resp.json["error"] == "Insufficient permissions"

    def test_soldier_cannot_list_disciplinary(self, client, soldier_headers):
        assert client.get("/api/disciplinary", headers=soldier_headers).status_code == 403

    def test_soldier_cannot_view_audit(self, client, soldier_headers):
        assert client.get("/api/audit", headers=soldier_headers).status_code == 403

    def test_mp_cannot_award_merit(self, client, mp_headers, mp):
        resp = client.post(
            "/api/merit-points",
            json={"user_id": mp.id, "amount": 10, "reason": "Self award"},
            headers=mp_headers,
        )
        assert resp.status_code == 403

    def test_admin_cannot_promote(self, client, admin_headers, admin):
        resp = client.post(
            "/api/promotions",
            json={"user_id": admin.id, "to_rank": "GA"},
            headers=admin_headers,
        )
        assert resp.status_code == 403

    def test_admin_cannot_go_on_duty(self, client, admin_headers):
        assert client.post("/api/duty/on", headers=admin_headers).status_code == 403

    def test_general_cannot_manage_users(self, client, general_headers):
        assert client.get("/api/users", headers=general_headers).status_code == 403

    def test_general_cannot_export(self, client, general_headers):
        assert client.get("/api/admin/export", headers=general_headers).status_code == 403


# =============================================================================
# ALLOWED
# =============================================================================


class TestAllowed:

    def test_admin_can_list_users(self, client, admin_headers):
        resp = client.get("/api/users", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json[0]["discord_username"] == "admin_user"
        assert "password_hash" not in resp.json[0]

    def test_mp_can_list_disciplinary(self, client, mp_headers):
        assert client.get("/api/disciplinary", headers=mp_headers).status_code == 200

    def test_colonel_can_list_missions(self, client, colonel_headers):
        assert client.get("/api/missions", headers=colonel_headers).status_code == 200

    def test_general_can_view_audit(self, client, general_headers):
        assert client.get("/api/audit", headers=general_headers).status_code == 200

    def test_soldier_reads_own_profile(self, client, soldier_headers):
        resp = client.get("/api/users/me", headers=soldier_headers)
        assert resp.status_code == 200
        assert resp.json["role"] == "Soldier"

    def test_health(self, client, db_session):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json["status"] == "healthy"
