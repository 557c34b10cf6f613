# Overview: Service-layer operations for auth; password hashing and login.

"""
Authentication Service

WHY: Every action must be attributable. Members log in with their discord
username and a password hashed with bcrypt.

SECURITY NOTES:
- bcrypt cost factor comes from app config (BCRYPT_ROUNDS)
- Minimum 8 characters, at least one letter and one digit
- Every failure is audited with its specific cause, but the caller only
  ever sees one generic message
- Throttling lives in login_throttle_service; authenticate() knows nothing
  about it
- Session tokens managed separately (see session_service.py)
"""

import re

import bcrypt
from flask import current_app

from . import audit_service, record_store
from ..models import User
from roster.time_utils import utcnow


GENERIC_LOGIN_ERROR = "Invalid credentials"


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


class InvalidCredentialsError(Exception):
    """Unknown identifier, account without a password, or wrong password."""
    pass


class AccountInactiveError(Exception):
    """Credentials belong to a member whose status is not active."""
    pass


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Requirements:
    - Minimum 8 characters
    - At least one letter
    - At least one digit

    Raises PasswordValidationError if requirements not met.
    """
    if not isinstance(password, str) or len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Za-z]', password):
        raise PasswordValidationError("Password must contain at least one letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False for malformed hashes instead of raising.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except (TypeError, ValueError):
        return False


def authenticate(identifier: str, password: str) -> User:
    """
    Authenticate a member by discord username (case-insensitive) and password.

    On success last_activity is set to now and `user_login` is audited.

    Raises:
        InvalidCredentialsError: unknown identifier, no password set, wrong password
        AccountInactiveError: the member's status is not active

    Every failure is audited before raising:
    - failed_login_attempt_unknown_user (no performer; identifier as new value)
    - failed_login_attempt_no_password
    - failed_login_attempt_inactive_user
    - failed_login_attempt
    """
    identifier = (identifier or "").strip()
    user = record_store.find_user_by_username(identifier) if identifier else None

    if user is None:
        audit_service.record(None, "failed_login_attempt_unknown_user", "user", None, new_value=identifier)
        raise InvalidCredentialsError(GENERIC_LOGIN_ERROR)

    if not user.password_hash:
        audit_service.record(user.id, "failed_login_attempt_no_password", "user", user.id)
        raise InvalidCredentialsError(GENERIC_LOGIN_ERROR)

    if not user.is_active:
        audit_service.record(user.id, "failed_login_attempt_inactive_user", "user", user.id)
        raise AccountInactiveError(GENERIC_LOGIN_ERROR)

    if not verify_password(password or "", user.password_hash):
        audit_service.record(user.id, "failed_login_attempt", "user", user.id)
        raise InvalidCredentialsError(GENERIC_LOGIN_ERROR)

    with record_store.transaction():
        record_store.update_user(user, {"last_activity": utcnow()})
        user_id = user.id

    audit_service.record(user_id, "user_login", "user", user_id)
    return user
