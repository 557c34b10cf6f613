# Overview: Permission category constants for grouping related permissions.


class PermissionCategory:
    """Permission categories for organization and UI display."""
    PERSONNEL = "PERSONNEL"
    DUTY = "DUTY"
    DISCIPLINARY = "DISCIPLINARY"
    PROMOTIONS = "PROMOTIONS"
    MERIT = "MERIT"
    REPORTS = "REPORTS"
    ADMINISTRATION = "ADMINISTRATION"
    AUDIT = "AUDIT"
