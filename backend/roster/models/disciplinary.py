from __future__ import annotations

from ..extensions import db
from roster.time_utils import to_utc_z


class DisciplinaryRecord(db.Model):
    """
    Disciplinary record issued against a member.

    category: minor / moderate / severe
    status: active / appealed / closed

    version is bumped by SQLAlchemy on every UPDATE. Writers are serialised
    by the store's write lock, so the last writer wins.
    """
    __tablename__ = "disciplinary_records"
    __table_args__ = (
        db.Index("ix_disciplinary_user_status", "user_id", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    issued_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    reason = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(16), nullable=False)
    status = db.Column(db.String(16), nullable=False, default="active", index=True)

    # Links to screenshots, recordings, etc.
    evidence = db.Column(db.JSON, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    date = db.Column(db.DateTime(timezone=True), nullable=False)

    version = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    user = db.relationship("User", foreign_keys=[user_id], backref=db.backref("disciplinary_records", lazy=True))
    issuer = db.relationship("User", foreign_keys=[issued_by])

    __mapper_args__ = {"version_id_col": version}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "issued_by": self.issued_by,
            "reason": self.reason,
            "category": self.category,
            "status": self.status,
            "evidence": list(self.evidence or []),
            "notes": self.notes,
            "date": to_utc_z(self.date),
            "version": self.version,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
