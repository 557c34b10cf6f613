# Overview: Flask API routes for disciplinary records.

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_permission, require_any_permission, require_json_object
from ..services import disciplinary_service
from ..validation import ValidationError, NotFoundError


disciplinary_bp = Blueprint("disciplinary", __name__, url_prefix="/api/disciplinary")


@disciplinary_bp.get("")
@require_auth
@require_permission("view_all_disciplinary")
def list_records_route():
    user_id = request.args.get("user_id", type=int)
    status = request.args.get("status")
    return jsonify(disciplinary_service.list_records(user_id=user_id, status=status))


@disciplinary_bp.get("/mine")
@require_auth
@require_any_permission("view_own_disciplinary", "view_all_disciplinary")
def my_records_route():
    return jsonify(disciplinary_service.list_records(user_id=g.current_user.id))


@disciplinary_bp.post("")
@require_auth
@require_permission("create_disciplinary")
@require_json_object
def create_record_route():
    data = request.get_json(silent=True) or {}

    try:
        record = disciplinary_service.create_record(issued_by=g.current_user.id, payload=data)
        return jsonify(record.to_dict()), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@disciplinary_bp.patch("/<int:record_id>")
@require_auth
@require_permission("update_disciplinary")
@require_json_object
def update_record_route(record_id: int):
    data = request.get_json(silent=True) or {}

    try:
        record = disciplinary_service.update_record(actor_id=g.current_user.id, record_id=record_id, payload=data)
        return jsonify(record.to_dict())
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
