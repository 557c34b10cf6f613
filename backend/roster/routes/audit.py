# Overview: Flask API routes for reading the audit trail.

from flask import Blueprint, request, jsonify

from ..decorators import require_auth, require_permission
from ..services import audit_service


audit_bp = Blueprint("audit", __name__, url_prefix="/api/audit")

MAX_LIMIT = 1000


@audit_bp.get("")
@require_auth
@require_permission("view_audit_logs")
def list_audit_route():
    """
    Query params:
    - action: filter by action tag (e.g. failed_login_attempt)
    - performed_by: filter by member id
    - limit: max entries (default 500)
    """
    action = request.args.get("action")
    performed_by = request.args.get("performed_by", type=int)
    limit = request.args.get("limit", default=500, type=int)
    limit = max(1, min(limit, MAX_LIMIT))

    return jsonify(audit_service.list_entries(action=action, performed_by=performed_by, limit=limit))
