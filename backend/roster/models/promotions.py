from __future__ import annotations

from ..extensions import db
from roster.time_utils import to_utc_z


class Promotion(db.Model):
    """
    Immutable record of a rank promotion.

    WHY: The rank field on User only holds the current rank; promotions are
    the history. Created by promotion_service.promote only.
    """
    __tablename__ = "promotions"
    __table_args__ = (
        db.Index("ix_promotions_user_date", "user_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    from_rank = db.Column(db.String(8), nullable=False)
    to_rank = db.Column(db.String(8), nullable=False)

    approved_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    reason = db.Column(db.Text, nullable=True)

    date = db.Column(db.DateTime(timezone=True), nullable=False)

    version = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    user = db.relationship("User", foreign_keys=[user_id], backref=db.backref("promotions", lazy=True))
    approver = db.relationship("User", foreign_keys=[approved_by])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "from_rank": self.from_rank,
            "to_rank": self.to_rank,
            "approved_by": self.approved_by,
            "reason": self.reason,
            "date": to_utc_z(self.date),
            "version": self.version,
            "created_at": to_utc_z(self.created_at),
        }
