# Overview: Record store; per-collection accessors and whole-store snapshots.

"""
Record Store

WHY: One place owns every collection. Services never query models
directly; they go through the accessors below, inside transaction().

DESIGN:
- Backed by SQLAlchemy (SQLite by default), so each logical operation is
  one database transaction: either every write lands or none does.
- transaction() also holds the process-wide write lock, so two requests
  cannot interleave a read-modify-write on the same collection.
- Accessors that create or change rows only flush; transaction() commits.
- export_snapshot()/import_snapshot() move the whole store as one JSON
  document with the collections in a fixed order.
"""

from __future__ import annotations

from collections import OrderedDict
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import DateTime, func

from ..extensions import db
from ..models import (
    User,
    Unit,
    DutyLog,
    DisciplinaryRecord,
    Promotion,
    MeritPointTransaction,
    Mission,
    AuditLog,
    Award,
    UserAward,
    SessionToken,
)
from .concurrency import serialized_writes, lock_for_update
from roster.time_utils import parse_iso_datetime, to_utc_z


# Snapshot layout: collection name -> model, in serialisation order
SNAPSHOT_COLLECTIONS = OrderedDict([
    ("users", User),
    ("duty_logs", DutyLog),
    ("disciplinary_records", DisciplinaryRecord),
    ("promotions", Promotion),
    ("merit_point_transactions", MeritPointTransaction),
    ("missions", Mission),
    ("units", Unit),
    ("audit_logs", AuditLog),
    ("awards", Award),
    ("user_awards", UserAward),
])


class SnapshotError(ValueError):
    """Raised when a snapshot document is malformed."""
    pass


@contextmanager
def transaction():
    """
    One logical unit of work.

    Commits on normal exit, rolls back and re-raises on any exception.
    Not reentrant: do not nest transaction() blocks.

    Reads made outside a unit of work leave the session holding a pooled
    connection; that transaction is ended before waiting on the write lock
    so the lock holder can always get a connection.
    """
    if db.session().in_transaction():
        db.session.commit()
    with serialized_writes():
        try:
            yield
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise


def _add(row):
    db.session.add(row)
    db.session.flush()
    return row


def _apply(row, updates: dict):
    for key, value in updates.items():
        setattr(row, key, value)
    db.session.flush()
    return row


# =============================================================================
# USERS
# =============================================================================

def get_user(user_id: int, *, for_update: bool = False) -> User | None:
    query = db.session.query(User).filter_by(id=user_id)
    if for_update:
        query = lock_for_update(query)
    return query.first()


def get_user_by_discord_id(discord_id: str) -> User | None:
    return db.session.query(User).filter_by(discord_id=discord_id).first()


def find_user_by_username(username: str) -> User | None:
    """Case-insensitive lookup by discord username (the login identifier)."""
    return db.session.query(User).filter(
        func.lower(User.discord_username) == username.lower()
    ).first()


def list_users(*, status: str | None = None) -> list[User]:
    query = db.session.query(User)
    if status:
        query = query.filter_by(status=status)
    return query.order_by(User.id).all()


def get_user_names() -> dict[int, str]:
    """Map of user id -> "First Last" for display joins."""
    rows = db.session.query(User.id, User.first_name, User.last_name).all()
    return {row.id: f"{row.first_name} {row.last_name}" for row in rows}


def create_user(**fields) -> User:
    return _add(User(**fields))


def update_user(user: User, updates: dict) -> User:
    return _apply(user, updates)


# =============================================================================
# DUTY LOGS
# =============================================================================

def get_open_duty_log(user_id: int) -> DutyLog | None:
    return db.session.query(DutyLog).filter(
        DutyLog.user_id == user_id,
        DutyLog.end_time.is_(None),
    ).first()


def list_duty_logs_for_user(user_id: int) -> list[DutyLog]:
    return db.session.query(DutyLog).filter_by(user_id=user_id).order_by(DutyLog.start_time.desc()).all()


def list_open_duty_logs() -> list[DutyLog]:
    return db.session.query(DutyLog).filter(DutyLog.end_time.is_(None)).order_by(DutyLog.start_time).all()


def create_duty_log(**fields) -> DutyLog:
    return _add(DutyLog(**fields))


def update_duty_log(log: DutyLog, updates: dict) -> DutyLog:
    return _apply(log, updates)


# =============================================================================
# DISCIPLINARY RECORDS
# =============================================================================

def get_disciplinary_record(record_id: int) -> DisciplinaryRecord | None:
    return db.session.query(DisciplinaryRecord).filter_by(id=record_id).first()


def list_disciplinary_records(*, user_id: int | None = None, status: str | None = None) -> list[DisciplinaryRecord]:
    query = db.session.query(DisciplinaryRecord)
    if user_id is not None:
        query = query.filter_by(user_id=user_id)
    if status:
        query = query.filter_by(status=status)
    return query.order_by(DisciplinaryRecord.date.desc(), DisciplinaryRecord.id.desc()).all()


def create_disciplinary_record(**fields) -> DisciplinaryRecord:
    return _add(DisciplinaryRecord(**fields))


def update_disciplinary_record(record: DisciplinaryRecord, updates: dict) -> DisciplinaryRecord:
    return _apply(record, updates)


# =============================================================================
# PROMOTIONS
# =============================================================================

def list_promotions(*, user_id: int | None = None, since: datetime | None = None) -> list[Promotion]:
    query = db.session.query(Promotion)
    if user_id is not None:
        query = query.filter_by(user_id=user_id)
    if since is not None:
        query = query.filter(Promotion.date >= since)
    return query.order_by(Promotion.date.desc(), Promotion.id.desc()).all()


def create_promotion(**fields) -> Promotion:
    return _add(Promotion(**fields))


# =============================================================================
# MERIT POINT TRANSACTIONS
# =============================================================================

def list_merit_transactions(*, user_id: int | None = None) -> list[MeritPointTransaction]:
    query = db.session.query(MeritPointTransaction)
    if user_id is not None:
        query = query.filter_by(user_id=user_id)
    return query.order_by(MeritPointTransaction.date.desc(), MeritPointTransaction.id.desc()).all()


def sum_merit_transactions(user_id: int) -> int:
    total = db.session.query(func.coalesce(func.sum(MeritPointTransaction.amount), 0)).filter(
        MeritPointTransaction.user_id == user_id
    ).scalar()
    return int(total)


def create_merit_transaction(**fields) -> MeritPointTransaction:
    return _add(MeritPointTransaction(**fields))


# =============================================================================
# MISSIONS
# =============================================================================

def get_mission(mission_id: int) -> Mission | None:
    return db.session.query(Mission).filter_by(id=mission_id).first()


def list_missions() -> list[Mission]:
    return db.session.query(Mission).order_by(Mission.date.desc(), Mission.id.desc()).all()


def create_mission(**fields) -> Mission:
    return _add(Mission(**fields))


# =============================================================================
# UNITS
# =============================================================================

def get_unit_by_name(name: str) -> Unit | None:
    return db.session.query(Unit).filter(func.lower(Unit.name) == name.lower()).first()


def list_units() -> list[Unit]:
    return db.session.query(Unit).order_by(Unit.name).all()


def create_unit(**fields) -> Unit:
    return _add(Unit(**fields))


# =============================================================================
# AUDIT LOGS (append-only: no update/delete accessors)
# =============================================================================

def list_audit_logs(
    *,
    action: str | None = None,
    performed_by: int | None = None,
    limit: int | None = None,
) -> list[AuditLog]:
    """Newest first."""
    query = db.session.query(AuditLog)
    if action:
        query = query.filter_by(action=action)
    if performed_by is not None:
        query = query.filter_by(performed_by=performed_by)
    query = query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def create_audit_log(**fields) -> AuditLog:
    return _add(AuditLog(**fields))


# =============================================================================
# AWARDS / USER AWARDS
# =============================================================================

def get_award(award_id: int) -> Award | None:
    return db.session.query(Award).filter_by(id=award_id).first()


def get_award_by_name(name: str) -> Award | None:
    return db.session.query(Award).filter_by(name=name).first()


def list_awards() -> list[Award]:
    return db.session.query(Award).order_by(Award.precedence, Award.id).all()


def create_award(**fields) -> Award:
    return _add(Award(**fields))


def get_user_award(user_award_id: int) -> UserAward | None:
    return db.session.query(UserAward).filter_by(id=user_award_id).first()


def list_user_awards(*, user_id: int | None = None) -> list[UserAward]:
    query = db.session.query(UserAward)
    if user_id is not None:
        query = query.filter_by(user_id=user_id)
    return query.order_by(UserAward.date_awarded, UserAward.id).all()


def create_user_award(**fields) -> UserAward:
    return _add(UserAward(**fields))


def delete_user_award(user_award: UserAward) -> None:
    db.session.delete(user_award)
    db.session.flush()


# =============================================================================
# SNAPSHOT
# =============================================================================

def _row_to_snapshot(model, row) -> dict:
    data = {}
    for col in model.__table__.columns:
        value = getattr(row, col.key)
        if isinstance(value, datetime):
            value = to_utc_z(value)
        data[col.key] = value
    return data


def _snapshot_to_row(model, name: str, item: dict) -> dict:
    if not isinstance(item, dict):
        raise SnapshotError(f"{name}: every entry must be an object")

    columns = {col.key: col for col in model.__table__.columns}
    unknown = set(item) - set(columns)
    if unknown:
        raise SnapshotError(f"{name}: unknown fields {', '.join(sorted(unknown))}")

    row = {}
    for key, value in item.items():
        if value is not None and isinstance(columns[key].type, DateTime):
            try:
                value = parse_iso_datetime(value)
            except (TypeError, ValueError):
                raise SnapshotError(f"{name}.{key}: invalid datetime {value!r}")
        row[key] = value
    return row


def export_snapshot() -> OrderedDict:
    """
    Serialise every collection into one JSON-compatible document.

    Includes password hashes: the snapshot is a full backup.
    """
    snapshot = OrderedDict()
    for name, model in SNAPSHOT_COLLECTIONS.items():
        rows = db.session.query(model).order_by(model.id).all()
        snapshot[name] = [_row_to_snapshot(model, row) for row in rows]
    return snapshot


def import_snapshot(snapshot: dict) -> dict[str, int]:
    """
    Replace every collection with the snapshot's contents.

    Runs in one transaction; a malformed document leaves the store
    untouched. Missing collections are treated as empty. Login sessions are
    cleared because they may reference users that no longer exist.

    Returns row counts per collection.
    """
    if not isinstance(snapshot, dict):
        raise SnapshotError("Snapshot must be a JSON object")

    unknown = set(snapshot) - set(SNAPSHOT_COLLECTIONS)
    if unknown:
        raise SnapshotError(f"Unknown collections: {', '.join(sorted(unknown))}")

    prepared = OrderedDict()
    for name, model in SNAPSHOT_COLLECTIONS.items():
        items = snapshot.get(name) or []
        if not isinstance(items, list):
            raise SnapshotError(f"{name} must be a list")
        prepared[name] = [_snapshot_to_row(model, name, item) for item in items]

    counts = {}
    with transaction():
        db.session.query(SessionToken).delete()
        for model in reversed(SNAPSHOT_COLLECTIONS.values()):
            db.session.execute(model.__table__.delete())
        for name, model in SNAPSHOT_COLLECTIONS.items():
            rows = prepared[name]
            # Core insert keeps ids, versions and timestamps verbatim
            for row in rows:
                db.session.execute(model.__table__.insert().values(**row))
            counts[name] = len(rows)
    return counts
