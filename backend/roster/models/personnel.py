from __future__ import annotations

from ..extensions import db
from roster.time_utils import to_utc_z


class User(db.Model):
    """
    Member of the organization.

    WHY: Every action must be attributable to a member. Members are never
    hard-deleted; deactivation flips status to "inactive".

    merit_points is a cached balance. It must equal the sum of the member's
    merit_point_transactions and is only written by the merit ledger, inside
    the same transaction that appends the ledger row.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("discord_id", name="uq_users_discord_id"),
        db.UniqueConstraint("discord_username", name="uq_users_discord_username"),
        db.Index("ix_users_status", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    discord_id = db.Column(db.String(32), nullable=False)
    # Login identifier (matched case-insensitively)
    discord_username = db.Column(db.String(64), nullable=False)

    roblox_user_id = db.Column(db.String(32), nullable=True)
    roblox_username = db.Column(db.String(64), nullable=True)

    first_name = db.Column(db.String(64), nullable=False)
    last_name = db.Column(db.String(64), nullable=False)
    callsign = db.Column(db.String(32), nullable=True)

    rank = db.Column(db.String(8), nullable=False, default="PV1")
    role = db.Column(db.String(16), nullable=False, default="Soldier")
    unit = db.Column(db.String(64), nullable=False)
    mos = db.Column(db.String(16), nullable=True)

    # active / inactive
    status = db.Column(db.String(16), nullable=False, default="active")

    merit_points = db.Column(db.Integer, nullable=False, default=0)

    join_date = db.Column(db.DateTime(timezone=True), nullable=False)
    last_activity = db.Column(db.DateTime(timezone=True), nullable=True)

    # bcrypt hash; NULL means the account cannot log in
    password_hash = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "discord_id": self.discord_id,
            "discord_username": self.discord_username,
            "roblox_user_id": self.roblox_user_id,
            "roblox_username": self.roblox_username,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "callsign": self.callsign,
            "rank": self.rank,
            "role": self.role,
            "unit": self.unit,
            "mos": self.mos,
            "status": self.status,
            "merit_points": self.merit_points,
            "join_date": to_utc_z(self.join_date),
            "last_activity": to_utc_z(self.last_activity) if self.last_activity else None,
            "has_password": self.password_hash is not None,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class Unit(db.Model):
    """Organizational unit (division, battalion, company)."""
    __tablename__ = "units"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_units_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    abbreviation = db.Column(db.String(16), nullable=False)
    commander_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    description = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    commander = db.relationship("User", foreign_keys=[commander_id])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "abbreviation": self.abbreviation,
            "commander_id": self.commander_id,
            "description": self.description,
            "created_at": to_utc_z(self.created_at),
        }
