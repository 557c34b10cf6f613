from __future__ import annotations

from ..extensions import db
from roster.time_utils import to_utc_z


class Mission(db.Model):
    """
    After-action mission report filed by a commander.

    merit_points_awarded is informational only; it does not create ledger
    rows in merit_point_transactions.
    """
    __tablename__ = "missions"
    __table_args__ = (
        db.Index("ix_missions_date", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(128), nullable=False)
    mission_code = db.Column(db.String(32), nullable=False)
    description = db.Column(db.Text, nullable=False)

    commander_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    # List of user ids
    participants = db.Column(db.JSON, nullable=False, default=list)

    date = db.Column(db.DateTime(timezone=True), nullable=False)
    # Minutes
    duration = db.Column(db.Integer, nullable=False, default=0)

    # success / partial / failed
    outcome = db.Column(db.String(16), nullable=False)
    merit_points_awarded = db.Column(db.Integer, nullable=False, default=0)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    commander = db.relationship("User", foreign_keys=[commander_id])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "mission_code": self.mission_code,
            "description": self.description,
            "commander_id": self.commander_id,
            "participants": list(self.participants or []),
            "date": to_utc_z(self.date),
            "duration": self.duration,
            "outcome": self.outcome,
            "merit_points_awarded": self.merit_points_awarded,
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
