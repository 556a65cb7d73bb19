"""Business errors raised by the use cases.

They subclass ``ValueError`` because the use cases signal every business
failure that way; routes translate each class into a response.
"""

from __future__ import annotations

from collections.abc import Sequence


class NotFoundError(ValueError):
    """The requested record does not exist for the caller."""


class ValidationError(ValueError):
    """Input rejected before any write took place."""

    def __init__(self, message: str, *, fields: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.fields = tuple(fields)


class RateLimitedError(ValueError):
    """Retryable rejection carrying how long the caller has to wait."""

    def __init__(self, retry_after: int, message: str | None = None) -> None:
        super().__init__(
            message or f"Too many reset requests. Try again in {retry_after} seconds."
        )
        self.retry_after = retry_after


class InvalidOrExpiredOtpError(ValueError):
    """The submitted one-time code does not match or is past its expiry."""


class InvalidResetTokenError(ValueError):
    """The reset credential is forged, expired, reused or for another purpose."""


class InvalidCredentialsError(ValueError):
    """Email and password do not match an active account."""


__all__ = [
    "InvalidCredentialsError",
    "InvalidOrExpiredOtpError",
    "InvalidResetTokenError",
    "NotFoundError",
    "RateLimitedError",
    "ValidationError",
]
