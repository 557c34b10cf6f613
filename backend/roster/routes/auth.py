# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

SECURITY FEATURES:
- Login throttling per caller (LoginThrottlePolicy)
- One generic error for every failed login
- Session management with token-based auth
- Administrator password reset revokes every session of the member
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services import session_service
from ..services import login_throttle_service
from ..services import permission_service
from ..services import user_service
from ..services.auth_service import (
    AccountInactiveError,
    InvalidCredentialsError,
    PasswordValidationError,
    GENERIC_LOGIN_ERROR,
)
from ..services.user_service import UserNotFoundError
from ..decorators import require_auth, require_permission, require_json_object
from ..validation import is_storable_int


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
@require_json_object
def login_route():
    """
    Authenticate a member and create a session token.

    Body: {"username": <discord username>, "password": ...}

    Returns 429 with retry_after_seconds while the caller is throttled.
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return jsonify({"error": "username and password required"}), 400

    caller_key = request.remote_addr or "unknown"
    policy = login_throttle_service.get_login_policy()

    try:
        decision, attempt_id = policy.reserve(caller_key, username)
        if not decision.allowed:
            return jsonify({
                "error": "Too many login attempts. Try again later.",
                "retry_after_seconds": decision.retry_after_seconds,
            }), 429

        try:
            user = auth_service.authenticate(username, password)
        except (InvalidCredentialsError, AccountInactiveError):
            return jsonify({"error": GENERIC_LOGIN_ERROR}), 401

        policy.mark_success(attempt_id)

        session, token = session_service.create_session(
            user,
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr,
        )

        return jsonify({
            "user": user.to_dict(),
            "permissions": sorted(permission_service.get_role_permissions(user.role)),
            "token": token,
            "session": session.to_dict(),
            "message": "Login successful",
        }), 200

    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
@require_auth
def logout_route():
    session_service.revoke_session(g.session_token, reason="User logout")
    return jsonify({"message": "Logged out"})


@auth_bp.get("/me")
@require_auth
def me_route():
    user = g.current_user
    return jsonify({
        "user": user.to_dict(),
        "permissions": sorted(permission_service.get_role_permissions(user.role)),
    })


@auth_bp.post("/reset-password")
@require_auth
@require_permission("manage_users")
@require_json_object
def reset_password_route():
    """Body: {"user_id": int, "new_password": str}"""
    data = request.get_json(silent=True) or {}
    user_id = data.get("user_id")
    new_password = data.get("new_password")

    if not is_storable_int(user_id) or not isinstance(new_password, str):
        return jsonify({"error": "user_id and new_password required"}), 400

    try:
        user_service.reset_password(actor_id=g.current_user.id, user_id=user_id, new_password=new_password)
        return jsonify({"message": "Password reset"})
    except PasswordValidationError as e:
        return jsonify({"error": str(e)}), 400
    except UserNotFoundError as e:
        return jsonify({"error": str(e)}), 404
