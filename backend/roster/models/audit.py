from __future__ import annotations

from ..extensions import db
from roster.time_utils import to_utc_z


class AuditLog(db.Model):
    """
    Audit trail of performed actions.

    WHY: Reconstruct who did what, including failed logins and the prior
    value of anything that was overwritten or deleted.

    IMMUTABLE: Never update or delete. Append-only for audit integrity.
    performed_by is NULL for system/anonymous actors (e.g. a login attempt
    against an unknown username).
    """
    __tablename__ = "audit_logs"
    __table_args__ = (
        db.Index("ix_audit_logs_performed_by", "performed_by"),
        db.Index("ix_audit_logs_action", "action"),
        db.Index("ix_audit_logs_timestamp", "timestamp"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    action = db.Column(db.String(64), nullable=False)
    performed_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    target_resource_type = db.Column(db.String(32), nullable=True)
    target_resource_id = db.Column(db.String(64), nullable=True)

    previous_value = db.Column(db.Text, nullable=True)
    new_value = db.Column(db.Text, nullable=True)

    details = db.Column(db.JSON, nullable=True)

    timestamp = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "action": self.action,
            "performed_by": self.performed_by,
            "target_resource_type": self.target_resource_type,
            "target_resource_id": self.target_resource_id,
            "previous_value": self.previous_value,
            "new_value": self.new_value,
            "details": self.details,
            "timestamp": to_utc_z(self.timestamp),
        }
