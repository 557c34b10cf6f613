# Overview: Service-layer operations for the merit point ledger.

"""
Merit Ledger Service

WHY: Merit points are awarded and deducted as ledger rows. The member's
merit_points column is a cached balance.

INVARIANT: User.merit_points == sum(amount) of the member's transactions.
The ledger row and the cached balance are written in the same transaction,
and nothing else writes merit_points (reconcile_balance repairs drift left
by direct database edits or partial imports).
"""

from . import audit_service, record_store
from .user_service import get_user_or_404
from ..models import MeritPointTransaction
from ..validation import NotFoundError, ValidationError, is_storable_int
from roster.time_utils import utcnow


def award(
    *,
    user_id: int,
    amount: int,
    reason: str,
    issued_by: int,
    related_mission_id: int | None = None,
) -> MeritPointTransaction:
    """
    Append a ledger row of `amount` (nonzero; negative deducts) and move the
    cached balance by the same amount.

    Raises UserNotFoundError, NotFoundError (unknown mission), ValidationError.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("amount must be an integer")
    if amount == 0:
        raise ValidationError("amount must be nonzero")
    if not is_storable_int(amount):
        raise ValidationError("amount is out of range")
    reason = (reason or "").strip() if isinstance(reason, str) else ""
    if not reason:
        raise ValidationError("reason is required")
    if related_mission_id is not None and not is_storable_int(related_mission_id):
        raise ValidationError("related_mission_id must be an integer")

    with record_store.transaction():
        user = get_user_or_404(user_id, for_update=True)
        if related_mission_id is not None and not record_store.get_mission(related_mission_id):
            raise NotFoundError("Mission not found")
        previous_balance = user.merit_points
        new_balance = previous_balance + amount

        txn = record_store.create_merit_transaction(
            user_id=user.id,
            amount=amount,
            reason=reason,
            issued_by=issued_by,
            related_mission_id=related_mission_id,
            date=utcnow(),
        )
        txn_id = txn.id
        record_store.update_user(user, {"merit_points": new_balance})

    audit_service.record(
        issued_by,
        "merit_points_awarded",
        "merit_transaction",
        txn_id,
        previous_value=str(previous_balance),
        new_value=str(new_balance),
    )
    return txn


def get_balance(user_id: int) -> dict:
    """Cached balance next to the ledger-derived one."""
    user = get_user_or_404(user_id)
    ledger_balance = record_store.sum_merit_transactions(user.id)
    return {
        "user_id": user.id,
        "balance": user.merit_points,
        "ledger_balance": ledger_balance,
        "consistent": user.merit_points == ledger_balance,
    }


def reconcile_balance(user_id: int) -> tuple[int, int]:
    """
    Reset the cached balance to the ledger sum.

    Returns (previous_cached, ledger_balance).
    """
    with record_store.transaction():
        user = get_user_or_404(user_id, for_update=True)
        previous = user.merit_points
        ledger_balance = record_store.sum_merit_transactions(user.id)
        if previous != ledger_balance:
            record_store.update_user(user, {"merit_points": ledger_balance})

    if previous != ledger_balance:
        audit_service.record(
            None,
            "merit_balance_reconciled",
            "user",
            user_id,
            previous_value=str(previous),
            new_value=str(ledger_balance),
        )
    return previous, ledger_balance


def list_transactions(*, user_id: int | None = None) -> list[dict]:
    names = record_store.get_user_names()
    result = []
    for txn in record_store.list_merit_transactions(user_id=user_id):
        data = txn.to_dict()
        data["user_name"] = names.get(txn.user_id, "Unknown")
        result.append(data)
    return result


def leaderboard() -> list[dict]:
    """Active members by balance, highest first."""
    users = sorted(record_store.list_users(status="active"), key=lambda u: (-u.merit_points, u.id))
    return [
        {
            "user_id": user.id,
            "user_name": user.full_name,
            "rank": user.rank,
            "points": user.merit_points,
        }
        for user in users
    ]
