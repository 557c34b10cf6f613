from __future__ import annotations

from ..extensions import db
from roster.time_utils import to_utc_z


class SessionToken(db.Model):
    """
    Bearer session issued at login.

    WHY: Requests carry an opaque token instead of a user id, so a caller
    cannot act as another member by guessing ids.

    SECURITY NOTES:
    - Tokens stored hashed in database (SHA-256)
    - Absolute and idle timeouts come from app config
    - Revocable on logout, password reset or deactivation
    - Not part of the data snapshot
    """
    __tablename__ = "session_tokens"
    __table_args__ = (
        db.Index("ix_session_tokens_user_active", "user_id", "is_revoked"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    # Token hash (never store plaintext tokens!)
    token_hash = db.Column(db.String(255), nullable=False, unique=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    last_used_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    is_revoked = db.Column(db.Boolean, nullable=False, default=False, index=True)
    revoked_at = db.Column(db.DateTime(timezone=True), nullable=True)
    revoked_reason = db.Column(db.String(255), nullable=True)

    user_agent = db.Column(db.String(512), nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)  # IPv6 max length

    user = db.relationship("User", backref=db.backref("session_tokens", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "created_at": to_utc_z(self.created_at),
            "last_used_at": to_utc_z(self.last_used_at),
            "expires_at": to_utc_z(self.expires_at),
            "is_revoked": self.is_revoked,
        }


class LoginAttempt(db.Model):
    """
    Login attempts per caller, used by the login throttle.

    IMMUTABLE: Append-only. Not part of the data snapshot; the audit log
    is the durable record of login outcomes.
    """
    __tablename__ = "login_attempts"
    __table_args__ = (
        db.Index("ix_login_attempts_caller_time", "caller_key", "occurred_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Remote address (or other caller key chosen by the policy)
    caller_key = db.Column(db.String(128), nullable=False)
    identifier = db.Column(db.String(64), nullable=True)
    success = db.Column(db.Boolean, nullable=False)

    occurred_at = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "caller_key": self.caller_key,
            "identifier": self.identifier,
            "success": self.success,
            "occurred_at": to_utc_z(self.occurred_at),
        }
