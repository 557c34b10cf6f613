# Overview: Flask API routes for duty operations; parses input and returns JSON responses.

"""
Duty Routes

SECURITY:
- Going on/off duty requires duty_on_off.
- Reading one's own duty state, history and hours requires only a session.
"""

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, require_permission
from ..services import duty_service
from ..services.duty_service import AlreadyOnDutyError, NotOnDutyError


duty_bp = Blueprint("duty", __name__, url_prefix="/api/duty")


@duty_bp.get("/current")
@require_auth
def current_route():
    log = duty_service.get_current(g.current_user.id)
    return jsonify(log.to_dict() if log else None)


@duty_bp.get("/active")
@require_auth
def active_route():
    return jsonify(duty_service.list_active())


@duty_bp.get("/history")
@require_auth
def history_route():
    logs = duty_service.get_history(g.current_user.id)
    return jsonify([log.to_dict() for log in logs])


@duty_bp.get("/stats")
@require_auth
def stats_route():
    return jsonify(duty_service.get_stats(g.current_user.id))


@duty_bp.post("/on")
@require_auth
@require_permission("duty_on_off")
def duty_on_route():
    try:
        log = duty_service.duty_on(user_id=g.current_user.id)
        return jsonify(log.to_dict()), 201
    except AlreadyOnDutyError as e:
        return jsonify({"error": str(e)}), 409


@duty_bp.post("/off")
@require_auth
@require_permission("duty_on_off")
def duty_off_route():
    try:
        log = duty_service.duty_off(user_id=g.current_user.id)
        return jsonify(log.to_dict())
    except NotOnDutyError as e:
        return jsonify({"error": str(e)}), 409
