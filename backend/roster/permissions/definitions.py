# Overview: All permission definitions organized by category.
# Each permission is defined as: (code, name, description, category)

from .categories import PermissionCategory


# -- PERSONNEL --

PERSONNEL_PERMISSIONS = [
    (
        "view_own_profile",
        "View Own Profile",
        "View your own personnel file",
        PermissionCategory.PERSONNEL,
    ),
    (
        "manage_users",
        "Manage Users",
        "Create, edit and deactivate personnel records, reset passwords",
        PermissionCategory.PERSONNEL,
    ),
    (
        "manage_roles_map",
        "Manage Roles Map",
        "Maintain the mapping between community roles and system roles",
        PermissionCategory.PERSONNEL,
    ),
    (
        "manage_units",
        "Manage Units",
        "Create and edit units",
        PermissionCategory.PERSONNEL,
    ),
]


# -- DUTY --

DUTY_PERMISSIONS = [
    (
        "duty_on_off",
        "Go On/Off Duty",
        "Open and close your own duty sessions",
        PermissionCategory.DUTY,
    ),
    (
        "view_own_duty",
        "View Own Duty",
        "View your own duty history and statistics",
        PermissionCategory.DUTY,
    ),
]


# -- DISCIPLINARY --

DISCIPLINARY_PERMISSIONS = [
    (
        "view_own_disciplinary",
        "View Own Disciplinary",
        "View disciplinary records issued against you",
        PermissionCategory.DISCIPLINARY,
    ),
    (
        "view_all_disciplinary",
        "View All Disciplinary",
        "View every disciplinary record",
        PermissionCategory.DISCIPLINARY,
    ),
    (
        "create_disciplinary",
        "Create Disciplinary",
        "Report a violation and open a disciplinary record",
        PermissionCategory.DISCIPLINARY,
    ),
    (
        "update_disciplinary",
        "Update Disciplinary",
        "Change status, notes and evidence of a disciplinary record",
        PermissionCategory.DISCIPLINARY,
    ),
    (
        "revoke_disciplinary",
        "Revoke Disciplinary",
        "Close a disciplinary record",
        PermissionCategory.DISCIPLINARY,
    ),
    (
        "override_disciplinary",
        "Override Disciplinary",
        "Override disciplinary decisions made by others",
        PermissionCategory.DISCIPLINARY,
    ),
]


# -- PROMOTIONS --

PROMOTION_PERMISSIONS = [
    (
        "view_own_promotions",
        "View Own Promotions",
        "View your own promotion history",
        PermissionCategory.PROMOTIONS,
    ),
    (
        "promote",
        "Promote",
        "Approve promotions and preview eligibility",
        PermissionCategory.PROMOTIONS,
    ),
    (
        "demote",
        "Demote",
        "Lower a member's rank",
        PermissionCategory.PROMOTIONS,
    ),
]


# -- MERIT --

MERIT_PERMISSIONS = [
    (
        "manage_merit_points",
        "Manage Merit Points",
        "Award or deduct merit points and grant or revoke awards",
        PermissionCategory.MERIT,
    ),
]


# -- REPORTS --

REPORT_PERMISSIONS = [
    (
        "view_unit_reports",
        "View Unit Reports",
        "View reports for your unit",
        PermissionCategory.REPORTS,
    ),
    (
        "view_all_reports",
        "View All Reports",
        "View and file mission reports across all units",
        PermissionCategory.REPORTS,
    ),
]


# -- ADMINISTRATION --

ADMINISTRATION_PERMISSIONS = [
    (
        "export_import_json",
        "Export/Import Data",
        "Export or restore the full data snapshot",
        PermissionCategory.ADMINISTRATION,
    ),
    (
        "configure_bot",
        "Configure Bot",
        "Configure the companion chat bot",
        PermissionCategory.ADMINISTRATION,
    ),
]


# -- AUDIT --

AUDIT_PERMISSIONS = [
    (
        "view_audit_logs",
        "View Audit Logs",
        "Read the audit trail",
        PermissionCategory.AUDIT,
    ),
]


# Combined list of all permissions (preserves original ordering)
PERMISSION_DEFINITIONS = (
    PERSONNEL_PERMISSIONS
    + DUTY_PERMISSIONS
    + DISCIPLINARY_PERMISSIONS
    + PROMOTION_PERMISSIONS
    + MERIT_PERMISSIONS
    + REPORT_PERMISSIONS
    + ADMINISTRATION_PERMISSIONS
    + AUDIT_PERMISSIONS
)
