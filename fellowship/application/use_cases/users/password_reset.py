"""Use cases for the OTP based password reset flow.

``request -> throttle -> verify -> consume``: a request stores the salted hash
of a fresh 6-digit code, verifying the code yields a short-lived credential
scoped to password resets, and presenting that credential changes the
password and clears every reset field on the user.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from fellowship.application.exceptions import (
    InvalidOrExpiredOtpError,
    InvalidResetTokenError,
    RateLimitedError,
    ValidationError,
)
from fellowship.config import get_settings
from fellowship.domain.entities import ResetAttemptState, ResetPolicy, User
from fellowship.infrastructure.repositories import UserRepository
from fellowship.infrastructure.security import (
    create_reset_token,
    decode_reset_token,
    generate_otp,
    get_password_hash,
    hash_otp,
    otp_fingerprint,
    verify_otp_hash,
)
from fellowship.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def reset_policy_from_settings() -> ResetPolicy:
    settings = get_settings()
    return ResetPolicy(
        window=timedelta(minutes=settings.password_reset_window_minutes),
        max_attempts=settings.password_reset_max_attempts,
        otp_ttl=timedelta(minutes=settings.password_reset_otp_ttl_minutes),
        max_verify_attempts=settings.password_reset_max_verify_attempts,
    )


def ensure_valid_password(password: str) -> str:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            fields=["password"],
        )
    return password


def request_password_reset(
    session: Session,
    *,
    email: str,
    now: datetime | None = None,
    policy: ResetPolicy | None = None,
) -> tuple[User, str] | None:
    """Generate a reset code for the account behind ``email``.

    Returns the user and the plain code so the caller can deliver it, or
    ``None`` when no active account uses ``email``. Raises
    :class:`RateLimitedError` when the throttle window is exhausted.
    """

    repository = UserRepository(session)
    user = repository.get_by_email(email)
    if user is None or not user.is_active:
        logger.info("Password reset requested for unknown email %s", email)
        return None

    now = now or now_in_app_timezone()
    policy = policy or reset_policy_from_settings()

    state, decision = user.reset_state.register_request(now, policy)
    if not decision.allowed:
        logger.info(
            "Password reset for user %s throttled; retry in %s seconds",
            user.id,
            decision.retry_after,
        )
        raise RateLimitedError(decision.retry_after)

    otp = generate_otp()
    state = state.with_otp(hash_otp(otp), now, policy)
    repository.save_reset_state(user.id, state)
    return user, otp


def verify_password_reset_otp(
    session: Session,
    *,
    email: str,
    otp: str,
    now: datetime | None = None,
    policy: ResetPolicy | None = None,
) -> str:
    """Exchange a valid code for a reset credential.

    The pending code stays in place so the credential can still be checked
    against it; nothing about the password changes yet. Every wrong code is
    counted and the pending code is discarded once the policy limit is hit.
    """

    now = now or now_in_app_timezone()
    repository = UserRepository(session)
    user = repository.get_by_email(email)
    if user is None or not user.is_active:
        raise InvalidOrExpiredOtpError("Invalid or expired code")

    state = user.reset_state
    if not state.otp_is_pending(now):
        raise InvalidOrExpiredOtpError("Invalid or expired code")
    if not verify_otp_hash(otp, state.otp_hash):
        state = state.register_failed_verification(policy or reset_policy_from_settings())
        repository.save_reset_state(user.id, state)
        if state.otp_hash is None:
            logger.info(
                "Pending reset code for user %s discarded after %s wrong attempts",
                user.id,
                state.failed_verifications,
            )
        raise InvalidOrExpiredOtpError("Invalid or expired code")

    return create_reset_token(user_id=user.id, otp_hash=state.otp_hash, issued_at=now)


def reset_password(
    session: Session,
    *,
    reset_token: str,
    new_password: str,
    email: str | None = None,
) -> User:
    """Set a new password using a credential obtained from OTP verification."""

    ensure_valid_password(new_password)
    try:
        payload = decode_reset_token(reset_token)
        user_id = int(payload["sub"])
    except (ValueError, KeyError) as exc:
        raise InvalidResetTokenError("Invalid or expired reset token") from exc

    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None or not user.is_active:
        raise InvalidResetTokenError("Invalid or expired reset token")
    if email is not None and email.strip().lower() != user.email:
        raise InvalidResetTokenError("Invalid or expired reset token")

    pending_hash = user.reset_state.otp_hash
    if not pending_hash or otp_fingerprint(pending_hash) != payload["fp"]:
        raise InvalidResetTokenError("Invalid or expired reset token")

    updated = repository.update_password(
        user.id,
        get_password_hash(new_password),
        reset_state=ResetAttemptState.cleared(),
    )
    logger.info("Password reset completed for user %s", user.id)
    return updated


__all__ = [
    "MIN_PASSWORD_LENGTH",
    "ensure_valid_password",
    "request_password_reset",
    "reset_password",
    "reset_policy_from_settings",
    "verify_password_reset_otp",
]
