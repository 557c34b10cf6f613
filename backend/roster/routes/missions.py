# Overview: Flask API routes for mission reports.

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_permission, require_json_object
from ..services import mission_service
from ..validation import ValidationError


missions_bp = Blueprint("missions", __name__, url_prefix="/api/missions")


@missions_bp.get("")
@require_auth
@require_permission("view_all_reports")
def list_missions_route():
    return jsonify(mission_service.list_missions())


@missions_bp.post("")
@require_auth
@require_permission("view_all_reports")
@require_json_object
def create_mission_route():
    data = request.get_json(silent=True) or {}

    try:
        mission = mission_service.create_mission(commander_id=g.current_user.id, payload=data)
        return jsonify(mission.to_dict()), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
