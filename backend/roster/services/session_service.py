# Overview: Service-layer operations for session; bearer token lifecycle.

"""
Session Token Management Service

WHY: Secure session management with automatic timeout and revocation.
Tokens are cryptographically secure, hashed in database, and time-limited.

SECURITY FEATURES:
- Cryptographically secure random tokens (32 bytes)
- Tokens hashed with SHA-256 before storage (fast, one-way)
- Absolute timeout (SESSION_ABSOLUTE_TIMEOUT_HOURS, default 24h)
- Idle timeout (SESSION_IDLE_TIMEOUT_HOURS, default 2h)
- Revocable on logout, password reset or deactivation
- Tracks client IP and user agent for security monitoring
"""

import secrets
import hashlib
from datetime import timedelta

from flask import current_app

from ..extensions import db
from ..models import SessionToken, User
from .record_store import transaction
from roster.time_utils import utcnow


def _absolute_timeout() -> timedelta:
    return timedelta(hours=current_app.config.get("SESSION_ABSOLUTE_TIMEOUT_HOURS", 24))


def _idle_timeout() -> timedelta:
    return timedelta(hours=current_app.config.get("SESSION_IDLE_TIMEOUT_HOURS", 2))


def generate_token() -> str:
    """
    Generate cryptographically secure random token.

    Returns 64-character hex string (32 bytes of entropy).
    This is the plaintext token sent to client (never stored).
    """
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """Hash token for database storage using SHA-256."""
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def _revoke(session: SessionToken, reason: str, now) -> None:
    session.is_revoked = True
    session.revoked_at = now
    session.revoked_reason = reason


def create_session(
    user: User,
    user_agent: str | None = None,
    ip_address: str | None = None
) -> tuple[SessionToken, str]:
    """
    Create new session token for user.

    Returns (session_record, plaintext_token).
    Client receives plaintext_token, database stores only the hash.
    """
    plaintext_token = generate_token()
    now = utcnow()

    session = SessionToken(
        user_id=user.id,
        token_hash=hash_token(plaintext_token),
        created_at=now,
        last_used_at=now,
        expires_at=now + _absolute_timeout(),
        user_agent=(user_agent or "")[:512] or None,
        ip_address=ip_address,
        is_revoked=False
    )

    with transaction():
        db.session.add(session)

    return session, plaintext_token


def validate_session(token: str) -> User | None:
    """
    Validate session token and return the member it belongs to.

    Returns None if:
    - Token is invalid, expired, or revoked
    - Session has been idle too long (auto-revoked)
    - Member is no longer active (auto-revoked)

    Updates last_used_at on successful validation.
    """
    token_hash = hash_token(token)
    now = utcnow()

    with transaction():
        session = db.session.query(SessionToken).filter_by(
            token_hash=token_hash,
            is_revoked=False
        ).first()

        if not session:
            return None

        # Check absolute timeout
        if session.expires_at < now:
            return None

        # Check idle timeout
        if now - session.last_used_at > _idle_timeout():
            _revoke(session, "Idle timeout", now)
            return None

        user = session.user
        if not user or not user.is_active:
            _revoke(session, "User account deactivated", now)
            return None

        session.last_used_at = now

    return user


def revoke_session(token: str, reason: str = "User logout") -> bool:
    """
    Revoke session token.

    Returns True if session was revoked, False if not found.
    """
    with transaction():
        session = db.session.query(SessionToken).filter_by(
            token_hash=hash_token(token),
            is_revoked=False
        ).first()

        if not session:
            return False

        _revoke(session, reason, utcnow())
    return True


def revoke_all_user_sessions(user_id: int, reason: str = "Revoke all sessions") -> int:
    """
    Revoke all active sessions for a user.

    Returns count of sessions revoked. Forces re-authentication on all devices.
    """
    now = utcnow()

    with transaction():
        sessions = db.session.query(SessionToken).filter_by(
            user_id=user_id,
            is_revoked=False
        ).all()

        for session in sessions:
            _revoke(session, reason, now)

    return len(sessions)


def cleanup_expired_sessions(retention_days: int = 30) -> int:
    """
    Delete expired and revoked sessions older than retention_days.

    Returns count of sessions deleted.
    """
    now = utcnow()
    cutoff = now - timedelta(days=retention_days)

    with transaction():
        deleted = db.session.query(SessionToken).filter(
            db.or_(
                SessionToken.expires_at < now,
                SessionToken.is_revoked.is_(True)
            ),
            SessionToken.created_at < cutoff
        ).delete(synchronize_session=False)

    return deleted
