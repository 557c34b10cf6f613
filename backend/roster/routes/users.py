# Overview: Flask API routes for member administration.

"""
User Routes

SECURITY:
- Listing, creating and editing members requires manage_users.
- A member reads their own profile with view_own_profile (or manage_users).
- merit_points is read-only here; it changes only through the merit ledger.
"""

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_permission, require_any_permission, require_json_object
from ..services import user_service
from ..services.auth_service import PasswordValidationError
from ..validation import ValidationError, ConflictError, NotFoundError


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_permission("manage_users")
def list_users_route():
    status = request.args.get("status")
    users = user_service.list_users(status=status)
    return jsonify([u.to_dict() for u in users])


@users_bp.post("")
@require_auth
@require_permission("manage_users")
@require_json_object
def create_user_route():
    data = dict(request.get_json(silent=True) or {})
    password = data.pop("password", None)

    try:
        user = user_service.create_user(actor_id=g.current_user.id, payload=data, password=password)
        return jsonify(user.to_dict()), 201
    except (ValidationError, PasswordValidationError) as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409


@users_bp.get("/me")
@require_auth
@require_any_permission("view_own_profile", "manage_users")
def me_route():
    return jsonify(g.current_user.to_dict())


@users_bp.get("/<int:user_id>")
@require_auth
@require_permission("manage_users")
def get_user_route(user_id: int):
    try:
        user = user_service.get_user_or_404(user_id)
        return jsonify(user.to_dict())
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@users_bp.patch("/<int:user_id>")
@require_auth
@require_permission("manage_users")
@require_json_object
def update_user_route(user_id: int):
    data = request.get_json(silent=True) or {}

    try:
        user = user_service.update_user(actor_id=g.current_user.id, user_id=user_id, payload=data)
        return jsonify(user.to_dict())
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
