# Overview: Service-layer operations for duty; duty sessions and hours.

"""
Duty Service

WHY: Members go on and off duty to open and close a duty log. Hours are
reported per period from the stored durations.

STATE MACHINE (per member):
    OFF_DUTY --duty_on--> ON_DUTY --duty_off--> OFF_DUTY

At most one open log (end_time IS NULL) per member. The service checks it,
and the partial unique index on duty_logs enforces it at the storage layer.
"""

from datetime import timedelta

from sqlalchemy.exc import IntegrityError

from . import audit_service, record_store
from ..models import DutyLog
from ..validation import ConflictError
from roster.time_utils import utcnow


class AlreadyOnDutyError(ConflictError):
    pass


class NotOnDutyError(ConflictError):
    pass


def elapsed_minutes(start, end) -> int:
    """Whole minutes between start and end, floored, never negative."""
    return max(int((end - start).total_seconds() // 60), 0)


def duty_on(*, user_id: int) -> DutyLog:
    try:
        with record_store.transaction():
            if record_store.get_open_duty_log(user_id):
                raise AlreadyOnDutyError("Already on duty")
            log = record_store.create_duty_log(user_id=user_id, start_time=utcnow())
            log_id = log.id
    except IntegrityError:
        # Lost a race with another open log for the same member
        raise AlreadyOnDutyError("Already on duty")

    audit_service.record(user_id, "duty_started", "duty_log", log_id)
    return log


def duty_off(*, user_id: int) -> DutyLog:
    with record_store.transaction():
        log = record_store.get_open_duty_log(user_id)
        if not log:
            raise NotOnDutyError("Not currently on duty")

        end_time = utcnow()
        duration = elapsed_minutes(log.start_time, end_time)
        record_store.update_duty_log(log, {"end_time": end_time, "duration": duration})
        log_id = log.id

    audit_service.record(user_id, "duty_ended", "duty_log", log_id, new_value=f"{duration} minutes")
    return log


def get_current(user_id: int) -> DutyLog | None:
    return record_store.get_open_duty_log(user_id)


def get_history(user_id: int) -> list[DutyLog]:
    return record_store.list_duty_logs_for_user(user_id)


def list_active() -> list[dict]:
    """Open duty logs joined to their (existing) members."""
    result = []
    for log in record_store.list_open_duty_logs():
        user = record_store.get_user(log.user_id)
        if user is None:
            continue
        result.append({"user": user.to_dict(), "duty": log.to_dict()})
    return result


def _hours(logs: list[DutyLog], since) -> int:
    # Logs still open (no duration) do not count
    minutes = sum(log.duration for log in logs if log.start_time >= since and log.duration is not None)
    # Round half up
    return (minutes + 30) // 60


def get_stats(user_id: int, *, now=None) -> dict:
    """
    Duty hours for today, the last 7 days and the current month.

    Period boundaries are in UTC: today starts at midnight, the month on
    day 1. A log counts toward a period when it started inside it.
    """
    now = now or utcnow()
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_start = now - timedelta(days=7)
    month_start = today_start.replace(day=1)

    logs = record_store.list_duty_logs_for_user(user_id)
    return {
        "today_hours": _hours(logs, today_start),
        "week_hours": _hours(logs, week_start),
        "month_hours": _hours(logs, month_start),
    }
