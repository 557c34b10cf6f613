# Overview: Read-only rank lookups (used by the web client and the chat-bot FAQ).

from flask import Blueprint, request, jsonify

from ..ranks import ALL_RANKS, RankTier, get_rank, get_ranks_by_tier


ranks_bp = Blueprint("ranks", __name__, url_prefix="/api/ranks")

TIERS = (RankTier.ENLISTED, RankTier.WARRANT, RankTier.OFFICER)


@ranks_bp.get("")
def list_ranks_route():
    """Optional ?tier=enlisted|warrant|officer"""
    tier = request.args.get("tier")
    if tier is None:
        ranks = ALL_RANKS
    elif tier in TIERS:
        ranks = get_ranks_by_tier(tier)
    else:
        return jsonify({"error": f"tier must be one of: {', '.join(TIERS)}"}), 400
    return jsonify([rank.to_dict() for rank in ranks])


@ranks_bp.get("/<code>")
def get_rank_route(code: str):
    rank = get_rank(code.upper())
    if rank is None:
        return jsonify({"error": "Rank not found"}), 404
    return jsonify(rank.to_dict())
