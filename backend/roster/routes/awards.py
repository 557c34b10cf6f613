# Overview: Flask API routes for awards and decorations.

"""
Award Routes

SECURITY:
- The catalogue and a member's awards are visible to any signed-in member.
- Granting and revoking require manage_merit_points.
"""

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_permission, require_json_object
from ..services import award_service
from ..validation import ValidationError, NotFoundError


awards_bp = Blueprint("awards", __name__, url_prefix="/api")


@awards_bp.get("/awards")
@require_auth
def list_awards_route():
    return jsonify([award.to_dict() for award in award_service.list_awards()])


@awards_bp.get("/users/<int:user_id>/awards")
@require_auth
def list_user_awards_route(user_id: int):
    return jsonify(award_service.list_user_awards(user_id))


@awards_bp.post("/users/<int:user_id>/awards")
@require_auth
@require_permission("manage_merit_points")
@require_json_object
def grant_award_route(user_id: int):
    data = request.get_json(silent=True) or {}

    try:
        user_award = award_service.grant(user_id=user_id, awarded_by=g.current_user.id, payload=data)
        return jsonify(user_award.to_dict()), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@awards_bp.delete("/user-awards/<int:user_award_id>")
@require_auth
@require_permission("manage_merit_points")
def revoke_award_route(user_award_id: int):
    try:
        award_service.revoke(user_award_id=user_award_id, revoked_by=g.current_user.id)
        return jsonify({"success": True, "message": "Award revoked successfully"})
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
