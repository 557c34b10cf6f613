# Overview: Flask API routes for the merit point ledger.

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_permission, require_json_object
from ..services import merit_service, permission_service
from ..validation import ValidationError, NotFoundError, is_storable_int


merit_bp = Blueprint("merit_points", __name__, url_prefix="/api/merit-points")


@merit_bp.get("")
@require_auth
def list_transactions_route():
    """All transactions for ledger managers, otherwise the caller's own."""
    if permission_service.user_has_permission(g.current_user, "manage_merit_points"):
        return jsonify(merit_service.list_transactions())
    return jsonify(merit_service.list_transactions(user_id=g.current_user.id))


@merit_bp.get("/leaderboard")
@require_auth
def leaderboard_route():
    return jsonify(merit_service.leaderboard())


@merit_bp.get("/balance/<int:user_id>")
@require_auth
@require_permission("manage_merit_points")
def balance_route(user_id: int):
    try:
        return jsonify(merit_service.get_balance(user_id))
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@merit_bp.post("")
@require_auth
@require_permission("manage_merit_points")
@require_json_object
def award_route():
    """Body: {"user_id": int, "amount": int (nonzero), "reason": str}"""
    data = request.get_json(silent=True) or {}
    user_id = data.get("user_id")

    if not is_storable_int(user_id):
        return jsonify({"error": "user_id is required"}), 400

    try:
        txn = merit_service.award(
            user_id=user_id,
            amount=data.get("amount"),
            reason=data.get("reason"),
            issued_by=g.current_user.id,
            related_mission_id=data.get("related_mission_id"),
        )
        return jsonify(txn.to_dict()), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
