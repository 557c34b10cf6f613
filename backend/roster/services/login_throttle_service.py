"""
Login Throttling Service

WHY: Prevent brute-force password attacks by limiting failed login attempts
per caller.

DESIGN:
- LoginThrottlePolicy is a small object with check/reserve/record methods so the
  login route can swap it out (tests, or a policy keyed differently)
- Attempts are persisted in the login_attempts table
- Only failures count toward the limit; successes are recorded for
  monitoring but ignored by the check
- Sliding window: the caller is allowed again once the oldest failure in
  the window ages out
- reserve() checks and stores the attempt under the write lock, so a burst
  of parallel logins from one caller cannot get past max_attempts; the
  stored row starts as a failure and mark_success() flips it
"""

from dataclasses import dataclass
from datetime import timedelta

from flask import current_app

from ..extensions import db
from ..models import LoginAttempt
from .record_store import transaction
from roster.time_utils import utcnow


@dataclass(frozen=True)
class ThrottleDecision:
    allowed: bool
    failed_attempts: int
    retry_after_seconds: int | None = None


class LoginThrottlePolicy:
    """At most max_attempts failed logins per caller within window."""

    def __init__(self, max_attempts: int = 5, window: timedelta = timedelta(minutes=15)):
        self.max_attempts = max_attempts
        self.window = window

    def _recent_failures(self, caller_key: str):
        cutoff = utcnow() - self.window
        return db.session.query(LoginAttempt).filter(
            LoginAttempt.caller_key == caller_key,
            LoginAttempt.success.is_(False),
            LoginAttempt.occurred_at >= cutoff,
        )

    def check(self, caller_key: str) -> ThrottleDecision:
        """Decide whether caller_key may attempt a login now."""
        failures = self._recent_failures(caller_key)
        count = failures.count()

        if count < self.max_attempts:
            return ThrottleDecision(allowed=True, failed_attempts=count)

        oldest = failures.order_by(LoginAttempt.occurred_at.asc()).first()
        reopens_at = oldest.occurred_at + self.window
        retry_after = max(1, int((reopens_at - utcnow()).total_seconds()) + 1)
        return ThrottleDecision(allowed=False, failed_attempts=count, retry_after_seconds=retry_after)

    def reserve(self, caller_key: str, identifier: str | None) -> tuple[ThrottleDecision, int | None]:
        """
        Check and, when allowed, store the attempt as a failure in one step.

        Returns (decision, attempt_id); attempt_id is None when throttled.
        """
        with transaction():
            decision = self.check(caller_key)
            if not decision.allowed:
                return decision, None
            attempt = LoginAttempt(
                caller_key=caller_key,
                identifier=(identifier or "")[:64] or None,
                success=False,
                occurred_at=utcnow(),
            )
            db.session.add(attempt)
            db.session.flush()
            attempt_id = attempt.id
        return decision, attempt_id

    def mark_success(self, attempt_id: int) -> None:
        with transaction():
            attempt = db.session.get(LoginAttempt, attempt_id)
            if attempt is not None:
                attempt.success = True

    def record(self, caller_key: str, identifier: str | None, success: bool) -> None:
        with transaction():
            db.session.add(LoginAttempt(
                caller_key=caller_key,
                identifier=(identifier or "")[:64] or None,
                success=success,
                occurred_at=utcnow(),
            ))


def get_login_policy() -> LoginThrottlePolicy:
    """
    Policy used by the login route.

    An app may install its own under app.extensions["login_throttle_policy"];
    otherwise one is built from LOGIN_RATE_LIMIT_* config.
    """
    policy = current_app.extensions.get("login_throttle_policy")
    if policy is not None:
        return policy
    return LoginThrottlePolicy(
        max_attempts=current_app.config.get("LOGIN_RATE_LIMIT_ATTEMPTS", 5),
        window=timedelta(minutes=current_app.config.get("LOGIN_RATE_LIMIT_WINDOW_MINUTES", 15)),
    )
