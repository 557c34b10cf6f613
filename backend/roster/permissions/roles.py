# Overview: Static role -> permission table.

"""
Each role's permission list is enumerated on its own. There is no
inheritance between roles: Admin manages users but cannot promote, General
promotes but cannot manage user records. Adding a capability to one role
must never change another role's set.
"""

USER_ROLES = ("Soldier", "MP", "Colonel", "General", "Admin")

ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    "Soldier": frozenset({
        "view_own_profile",
        "view_own_duty",
        "view_own_disciplinary",
        "view_own_promotions",
        "duty_on_off",
    }),
    "MP": frozenset({
        "view_own_profile",
        "view_own_duty",
        "view_all_disciplinary",
        "create_disciplinary",
        "update_disciplinary",
        "revoke_disciplinary",
        "view_unit_reports",
        "duty_on_off",
    }),
    "Colonel": frozenset({
        "view_own_profile",
        "view_own_duty",
        "view_all_disciplinary",
        "create_disciplinary",
        "update_disciplinary",
        "revoke_disciplinary",
        "view_unit_reports",
        "view_all_reports",
        "duty_on_off",
    }),
    "General": frozenset({
        "view_own_profile",
        "view_own_duty",
        "view_all_disciplinary",
        "create_disciplinary",
        "update_disciplinary",
        "revoke_disciplinary",
        "promote",
        "demote",
        "view_all_reports",
        "manage_merit_points",
        "override_disciplinary",
        "view_audit_logs",
        "duty_on_off",
    }),
    "Admin": frozenset({
        "manage_users",
        "manage_roles_map",
        "manage_units",
        "export_import_json",
        "configure_bot",
        "view_audit_logs",
        "view_all_reports",
        "view_all_disciplinary",
    }),
}
