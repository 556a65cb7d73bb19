"""Password reset attempt state and its throttling policy.

The state lives on the user record but every transition here is a pure
function of ``(state, now)`` so the policy can be exercised without a
database.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta


@dataclass(frozen=True)
class ResetPolicy:
    """Limits applied to password reset requests."""

    window: timedelta = timedelta(minutes=15)
    max_attempts: int = 3
    otp_ttl: timedelta = timedelta(minutes=10)
    max_verify_attempts: int = 5


@dataclass(frozen=True)
class ThrottleDecision:
    """Outcome of evaluating a reset request against the throttle window."""

    allowed: bool
    retry_after: int = 0


@dataclass(frozen=True)
class ResetAttemptState:
    """Pending OTP and request counters embedded on a user."""

    otp_hash: str | None = None
    otp_expires_at: datetime | None = None
    attempt_count: int = 0
    last_attempt_at: datetime | None = None
    failed_verifications: int = 0

    def within_window(self, now: datetime, policy: ResetPolicy) -> bool:
        """Return ``True`` when the last request falls in the trailing window."""

        if self.last_attempt_at is None:
            return False
        return now - self.last_attempt_at < policy.window

    def register_request(
        self, now: datetime, policy: ResetPolicy
    ) -> tuple["ResetAttemptState", ThrottleDecision]:
        """Return the state after a reset request made at ``now``.

        A rejected request leaves the state untouched. An accepted one resets
        the counter when the previous request is outside the window and then
        counts the current request.
        """

        in_window = self.within_window(now, policy)
        if in_window and self.attempt_count >= policy.max_attempts:
            window_end = self.last_attempt_at + policy.window  # type: ignore[operator]
            remaining = (window_end - now).total_seconds()
            return self, ThrottleDecision(allowed=False, retry_after=max(1, math.ceil(remaining)))

        count = self.attempt_count if in_window else 0
        updated = replace(self, attempt_count=count + 1, last_attempt_at=now)
        return updated, ThrottleDecision(allowed=True)

    def with_otp(self, otp_hash: str, now: datetime, policy: ResetPolicy) -> "ResetAttemptState":
        """Attach a freshly generated OTP hash expiring after the policy TTL."""

        return replace(
            self,
            otp_hash=otp_hash,
            otp_expires_at=now + policy.otp_ttl,
            failed_verifications=0,
        )

    def register_failed_verification(self, policy: ResetPolicy) -> "ResetAttemptState":
        """Count a wrong code, discarding the pending OTP once the limit is reached."""

        failures = self.failed_verifications + 1
        if failures >= policy.max_verify_attempts:
            return replace(
                self, otp_hash=None, otp_expires_at=None, failed_verifications=failures
            )
        return replace(self, failed_verifications=failures)

    def otp_is_pending(self, now: datetime) -> bool:
        """Return ``True`` when an unexpired OTP is waiting to be verified."""

        if not self.otp_hash or self.otp_expires_at is None:
            return False
        return now < self.otp_expires_at

    @classmethod
    def cleared(cls) -> "ResetAttemptState":
        return cls()


__all__ = ["ResetAttemptState", "ResetPolicy", "ThrottleDecision"]
