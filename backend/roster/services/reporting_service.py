# Overview: Read-only summaries for the dashboard and the admin panel.

from datetime import timedelta

from . import record_store
from roster.time_utils import utcnow


RECENT_PROMOTION_DAYS = 30
ACTIVITY_LIMIT = 10


def dashboard_stats(*, now=None) -> dict:
    now = now or utcnow()
    since = now - timedelta(days=RECENT_PROMOTION_DAYS)
    return {
        "total_personnel": len(record_store.list_users()),
        "active_on_duty": len(record_store.list_open_duty_logs()),
        "recent_promotions": len(record_store.list_promotions(since=since)),
        "pending_disciplinary": len(record_store.list_disciplinary_records(status="active")),
    }


def dashboard_activity() -> list[dict]:
    """Latest promotions, newest first."""
    names = record_store.get_user_names()
    activity = []
    for promotion in record_store.list_promotions()[:ACTIVITY_LIMIT]:
        activity.append({
            "id": promotion.id,
            "type": "promotion",
            "user_id": promotion.user_id,
            "user_name": names.get(promotion.user_id, "Unknown"),
            "from_rank": promotion.from_rank,
            "to_rank": promotion.to_rank,
            "date": promotion.to_dict()["date"],
        })
    return activity


def admin_stats() -> dict:
    return {
        "users": len(record_store.list_users()),
        "active_duty_logs": len(record_store.list_open_duty_logs()),
        "disciplinary_records": len(record_store.list_disciplinary_records()),
        "promotions": len(record_store.list_promotions()),
    }
