# Overview: Service-layer operations for promotions.

"""
Promotion Service

WHY: A promotion moves a member strictly up the rank table. The promotion
row and the member's new rank are written in one transaction.

Eligibility (check_eligibility) is a preview for the approver and never
blocks promote().
"""

from flask import current_app

from . import audit_service, record_store
from .disciplinary_service import has_active_severe
from .user_service import get_user_or_404
from ..models import Promotion
from ..ranks import get_rank
from ..validation import ConflictError, ValidationError
from roster.time_utils import utcnow


class InvalidRankError(ValidationError):
    pass


class InvalidPromotionError(ConflictError):
    pass


def validate_promotion(from_rank: str, to_rank: str) -> None:
    """
    Raise unless to_rank is strictly above from_rank.

    Ranks sharing a level (SPC/CPL, MSG/1SG, SGM/CSM) are not promotions
    of one another.
    """
    current = get_rank(from_rank)
    target = get_rank(to_rank)
    if current is None or target is None:
        raise InvalidRankError("Invalid rank")
    if target.level <= current.level:
        raise InvalidPromotionError("Cannot promote to same or lower rank")


def promote(*, user_id: int, to_rank: str, approved_by: int, reason: str | None = None) -> Promotion:
    with record_store.transaction():
        user = get_user_or_404(user_id, for_update=True)
        from_rank = user.rank
        validate_promotion(from_rank, to_rank)

        promotion = record_store.create_promotion(
            user_id=user.id,
            from_rank=from_rank,
            to_rank=to_rank,
            approved_by=approved_by,
            reason=reason,
            date=utcnow(),
            version=1,
        )
        promotion_id = promotion.id
        record_store.update_user(user, {"rank": to_rank})

    audit_service.record(
        approved_by,
        "promotion_approved",
        "promotion",
        promotion_id,
        previous_value=from_rank,
        new_value=to_rank,
    )
    return promotion


def check_eligibility(user_id: int) -> dict:
    user = get_user_or_404(user_id)
    minimum = current_app.config.get("PROMOTION_MIN_MERIT_POINTS", 50)

    reasons = []
    eligible = True

    if user.merit_points < minimum:
        eligible = False
        reasons.append(f"Insufficient merit points ({user.merit_points}/{minimum} required)")

    if has_active_severe(user.id):
        eligible = False
        reasons.append("Has active severe disciplinary records")

    if eligible:
        reasons.append("All requirements met")

    return {"user_id": user.id, "eligible": eligible, "reasons": reasons}


def list_promotions(*, user_id: int | None = None) -> list[dict]:
    names = record_store.get_user_names()
    result = []
    for promotion in record_store.list_promotions(user_id=user_id):
        data = promotion.to_dict()
        data["user_name"] = names.get(promotion.user_id, "Unknown")
        result.append(data)
    return result
