from __future__ import annotations

from ..extensions import db
from roster.time_utils import to_utc_z


class Award(db.Model):
    """
    Award catalog entry (decoration, badge, ribbon).

    precedence orders the catalog; lower values are worn first.
    """
    __tablename__ = "awards"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_awards_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    abbreviation = db.Column(db.String(16), nullable=False)
    category = db.Column(db.String(32), nullable=False)
    precedence = db.Column(db.Integer, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "abbreviation": self.abbreviation,
            "category": self.category,
            "precedence": self.precedence,
            "description": self.description,
            "created_at": to_utc_z(self.created_at),
        }


class UserAward(db.Model):
    """
    An award granted to a member.

    The same award may be granted more than once; repeats are told apart by
    oak_leaf_clusters. Revocation deletes the row (the audit log keeps the
    prior value).
    """
    __tablename__ = "user_awards"
    __table_args__ = (
        db.Index("ix_user_awards_user", "user_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    award_id = db.Column(db.Integer, db.ForeignKey("awards.id"), nullable=False, index=True)

    date_awarded = db.Column(db.DateTime(timezone=True), nullable=False)
    awarded_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    oak_leaf_clusters = db.Column(db.Integer, nullable=False, default=0)
    # Valor / combat devices
    v_device = db.Column(db.Boolean, nullable=False, default=False)
    c_device = db.Column(db.Boolean, nullable=False, default=False)
    citation = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    award = db.relationship("Award")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "award_id": self.award_id,
            "date_awarded": to_utc_z(self.date_awarded),
            "awarded_by": self.awarded_by,
            "oak_leaf_clusters": self.oak_leaf_clusters,
            "v_device": self.v_device,
            "c_device": self.c_device,
            "citation": self.citation,
            "created_at": to_utc_z(self.created_at),
        }
