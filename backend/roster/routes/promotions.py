# Overview: Flask API routes for promotions.

"""
Promotion Routes

SECURITY:
- Listing, eligibility previews and approving promotions require promote.
- A member sees their own promotion history with view_own_promotions.
"""

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_permission, require_json_object
from ..services import promotion_service
from ..services.promotion_service import InvalidRankError, InvalidPromotionError
from ..validation import NotFoundError, is_storable_int


promotions_bp = Blueprint("promotions", __name__, url_prefix="/api/promotions")


@promotions_bp.get("")
@require_auth
@require_permission("promote")
def list_promotions_route():
    return jsonify(promotion_service.list_promotions())


@promotions_bp.get("/mine")
@require_auth
@require_permission("view_own_promotions")
def my_promotions_route():
    return jsonify(promotion_service.list_promotions(user_id=g.current_user.id))


@promotions_bp.get("/eligibility/<int:user_id>")
@require_auth
@require_permission("promote")
def eligibility_route(user_id: int):
    try:
        return jsonify(promotion_service.check_eligibility(user_id))
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@promotions_bp.post("")
@require_auth
@require_permission("promote")
@require_json_object
def promote_route():
    """Body: {"user_id": int, "to_rank": str, "reason": str?}"""
    data = request.get_json(silent=True) or {}
    user_id = data.get("user_id")
    to_rank = data.get("to_rank")
    reason = data.get("reason")

    if not is_storable_int(user_id) or not isinstance(to_rank, str):
        return jsonify({"error": "user_id and to_rank required"}), 400
    if reason is not None and not isinstance(reason, str):
        return jsonify({"error": "reason must be a string"}), 400

    try:
        promotion = promotion_service.promote(
            user_id=user_id,
            to_rank=to_rank,
            approved_by=g.current_user.id,
            reason=reason,
        )
        return jsonify(promotion.to_dict()), 201
    except InvalidRankError as e:
        return jsonify({"error": str(e)}), 400
    except InvalidPromotionError as e:
        return jsonify({"error": str(e)}), 409
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
