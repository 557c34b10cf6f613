# Overview: Flask API routes for units.

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_permission, require_json_object
from ..services import unit_service
from ..validation import ValidationError, ConflictError, NotFoundError


units_bp = Blueprint("units", __name__, url_prefix="/api/units")


@units_bp.get("")
@require_auth
def list_units_route():
    return jsonify([unit.to_dict() for unit in unit_service.list_units()])


@units_bp.post("")
@require_auth
@require_permission("manage_units")
@require_json_object
def create_unit_route():
    data = request.get_json(silent=True) or {}

    try:
        unit = unit_service.create_unit(actor_id=g.current_user.id, payload=data)
        return jsonify(unit.to_dict()), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
