# Overview: Flask API routes for admin operations; parses input and returns JSON responses.

"""
Admin routes.

Provides endpoints for:
- Store-wide counts for the admin panel
- Full data snapshot export and import

Export and import replace or reveal every collection (password hashes
included), so both require export_import_json.
"""

from flask import Blueprint, request, jsonify, g, current_app
from sqlalchemy.exc import IntegrityError

from ..decorators import require_auth, require_permission
from ..services import audit_service, record_store, reporting_service
from ..services.record_store import SnapshotError
from roster.time_utils import utcnow, to_utc_z

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.get("/stats")
@require_auth
@require_permission("manage_users")
def stats_route():
    return jsonify(reporting_service.admin_stats())


@admin_bp.get("/export")
@require_auth
@require_permission("export_import_json")
def export_route():
    snapshot = record_store.export_snapshot()
    audit_service.record(g.current_user.id, "data_exported", "snapshot", None)

    # jsonify sorts keys; keep the collection order
    response = current_app.response_class(
        current_app.json.dumps(snapshot, sort_keys=False),
        mimetype="application/json",
    )
    stamp = to_utc_z(utcnow()).replace(":", "-")
    response.headers["Content-Disposition"] = f'attachment; filename="roster-export-{stamp}.json"'
    return response


@admin_bp.post("/import")
@require_auth
@require_permission("export_import_json")
def import_route():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Invalid JSON payload"}), 400

    actor_id = g.current_user.id
    try:
        counts = record_store.import_snapshot(data)
    except SnapshotError as e:
        return jsonify({"error": str(e)}), 400
    except IntegrityError:
        return jsonify({"error": "Snapshot violates uniqueness or reference constraints"}), 400
    except Exception:
        current_app.logger.exception("Failed to import snapshot")
        return jsonify({"error": "Import failed"}), 500

    # The importing member may not exist in the new data
    performer = actor_id if record_store.get_user(actor_id) else None
    audit_service.record(performer, "data_imported", "snapshot", None, details=counts)
    return jsonify({"message": "Import complete", "counts": counts})
