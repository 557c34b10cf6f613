# Overview: Request and permission decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services import session_service, permission_service
from .services.permission_service import FORBIDDEN_MESSAGE


def _is_authenticated() -> bool:
    return getattr(g, "current_user", None) is not None


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def require_auth(f):
    """
    Require a valid session token.

    Sets g.current_user to the authenticated User.

    SECURITY: Returns 401 if:
    - No Authorization header
    - Invalid, expired, idle or revoked token
    - Member no longer active
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = bearer_token()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        user = session_service.validate_session(token)
        if not user:
            return jsonify({"error": "Invalid or expired token"}), 401

        g.current_user = user
        g.session_token = token

        return f(*args, **kwargs)

    return decorated_function


def require_permission(permission_code: str):
    """Require a specific permission from the caller's role. Use after @require_auth."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            if not permission_service.user_has_permission(g.current_user, permission_code):
                return jsonify({
                    "error": FORBIDDEN_MESSAGE,
                    "required_permission": permission_code,
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def require_any_permission(*permission_codes):
    """Require any of the specified permissions."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            if not permission_service.user_has_any_permission(g.current_user, permission_codes):
                return jsonify({
                    "error": FORBIDDEN_MESSAGE,
                    "required_permissions": list(permission_codes),
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def require_json_object(f):
    """
    Reject a JSON body that is not an object (a string, list or number) with 400.

    A missing body is left to the route, which treats it as {}.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        data = request.get_json(silent=True)
        if data is not None and not isinstance(data, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400
        return f(*args, **kwargs)

    return decorated_function
