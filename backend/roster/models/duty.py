from __future__ import annotations

from ..extensions import db
from roster.time_utils import to_utc_z


class DutyLog(db.Model):
    """
    One duty session of a member.

    LIFECYCLE:
    - open: end_time is NULL (member is on duty)
    - closed: end_time and duration (whole minutes) are set on duty-off

    At most one open log per user. The partial unique index enforces this
    in the database as well as in duty_service.
    """
    __tablename__ = "duty_logs"
    __table_args__ = (
        db.Index("ix_duty_logs_user_start", "user_id", "start_time"),
        db.Index(
            "uq_duty_logs_one_open_per_user",
            "user_id",
            unique=True,
            sqlite_where=db.text("end_time IS NULL"),
            postgresql_where=db.text("end_time IS NULL"),
        ),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    start_time = db.Column(db.DateTime(timezone=True), nullable=False)
    end_time = db.Column(db.DateTime(timezone=True), nullable=True)

    # Whole minutes, floor-rounded, set on close
    duration = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    user = db.relationship("User", backref=db.backref("duty_logs", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "start_time": to_utc_z(self.start_time),
            "end_time": to_utc_z(self.end_time) if self.end_time else None,
            "duration": self.duration,
            "created_at": to_utc_z(self.created_at),
        }
