from __future__ import annotations

from ..extensions import db
from roster.time_utils import to_utc_z


class MeritPointTransaction(db.Model):
    """
    Append-only merit point ledger row.

    amount is signed: positive awards, negative deductions.
    IMMUTABLE: Never update or delete. The member's balance is the sum of
    these rows; User.merit_points caches that sum.
    """
    __tablename__ = "merit_point_transactions"
    __table_args__ = (
        db.Index("ix_merit_txn_user_date", "user_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    amount = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.Text, nullable=False)
    issued_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    # Soft reference: missions are stored after transactions in the snapshot
    related_mission_id = db.Column(db.Integer, nullable=True, index=True)

    date = db.Column(db.DateTime(timezone=True), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    user = db.relationship("User", foreign_keys=[user_id], backref=db.backref("merit_point_transactions", lazy=True))
    issuer = db.relationship("User", foreign_keys=[issued_by])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "amount": self.amount,
            "reason": self.reason,
            "issued_by": self.issued_by,
            "related_mission_id": self.related_mission_id,
            "date": to_utc_z(self.date),
            "created_at": to_utc_z(self.created_at),
        }
