# Overview: Single-writer serialisation for store mutations.

from __future__ import annotations

import threading
import time
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError

from ..extensions import db


# One writer at a time across the process. Reentrant so a service holding
# the lock can call another service that also writes.
_WRITE_LOCK = threading.RLock()


@contextmanager
def serialized_writes():
    """Hold the process-wide write lock for the duration of the block."""
    with _WRITE_LOCK:
        yield


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    The write lock only serialises one process; with several workers on a
    server database the row lock keeps balance and rank updates ordered.
    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a complete unit of work with retry on lock contention.

    func must perform all of its reads and writes and commit; it is called
    again from scratch after a rollback. Retries on OperationalError
    (SQLite "database is locked", deadlocks).
    """
    for attempt in range(attempts):
        try:
            return func()
        except OperationalError:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))
