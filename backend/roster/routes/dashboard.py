# Overview: Flask API routes for the dashboard summaries.

from flask import Blueprint, jsonify

from ..decorators import require_auth
from ..services import reporting_service


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("/stats")
@require_auth
def stats_route():
    return jsonify(reporting_service.dashboard_stats())


@dashboard_bp.get("/activity")
@require_auth
def activity_route():
    return jsonify(reporting_service.dashboard_activity())
