"""Use cases that persist notifications and then nudge devices by push.

Sending is two sequential phases inside one request. The fan-out write must
succeed and its errors reach the caller. The push that follows is best effort
and its failures only show up in the logs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fellowship.application.exceptions import NotFoundError, ValidationError
from fellowship.domain.entities import (
    DispatchReport,
    Notification,
    NotificationType,
    RecipientTarget,
)
from fellowship.infrastructure.push import PushDispatcher
from fellowship.infrastructure.repositories import (
    DeviceTokenRepository,
    NotificationRepository,
    UserRepository,
)
from fellowship.utils import now_in_app_timezone

from .resolve_recipients import resolve_recipients

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkSendResult:
    count: int
    recipient_ids: frozenset[int]
    dispatch: DispatchReport | None = None


def _ensure_content(title: str, message: str) -> tuple[str, str]:
    missing = [name for name, value in (("title", title), ("message", message)) if not (value or "").strip()]
    if missing:
        raise ValidationError(
            f"Missing required field(s): {', '.join(missing)}", fields=missing
        )
    return title.strip(), message.strip()


def fan_out(
    session: Session,
    recipient_ids: Iterable[int],
    *,
    title: str,
    message: str,
    type: NotificationType = NotificationType.GENERAL,
    data: dict[str, Any] | None = None,
) -> int:
    """Write one unread notification per recipient and return how many were written."""

    try:
        return NotificationRepository(session).bulk_create(
            recipient_ids,
            title=title,
            message=message,
            type=type,
            data=data,
            created_at=now_in_app_timezone(),
        )
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to store notification %r for its recipients", title)
        raise


def push_to_users(
    session: Session,
    dispatcher: PushDispatcher | None,
    user_ids: Iterable[int],
    *,
    title: str,
    body: str,
    data: dict[str, Any] | None = None,
) -> DispatchReport | None:
    """Send a push to every device registered by ``user_ids``. Never raises."""

    if dispatcher is None:
        return None
    try:
        targets = DeviceTokenRepository(session).tokens_for(user_ids)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Could not load push tokens; skipping push for %r", title)
        return None
    if not targets:
        logger.info("No registered devices for notification %r", title)
        return DispatchReport()
    return dispatcher.dispatch(targets, title, body, data)


def send_notification(
    session: Session,
    *,
    user_id: int,
    title: str,
    message: str,
    type: NotificationType = NotificationType.GENERAL,
    data: dict[str, Any] | None = None,
    dispatcher: PushDispatcher | None = None,
) -> Notification:
    """Store a notification for a single user and push it to their devices."""

    title, message = _ensure_content(title, message)
    recipient = UserRepository(session).get(user_id)
    if recipient is None or not recipient.is_active:
        raise NotFoundError("User not found")

    try:
        notification = NotificationRepository(session).create(
            Notification(
                id=None,
                user_id=user_id,
                title=title,
                message=message,
                type=type,
                read=False,
                data=dict(data or {}),
                created_at=now_in_app_timezone(),
            )
        )
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to store notification %r for user %s", title, user_id)
        raise

    push_to_users(session, dispatcher, {user_id}, title=title, body=message, data=data)
    return notification


def send_bulk_notification(
    session: Session,
    *,
    target: RecipientTarget,
    title: str,
    message: str,
    type: NotificationType = NotificationType.GENERAL,
    data: dict[str, Any] | None = None,
    dispatcher: PushDispatcher | None = None,
) -> BulkSendResult:
    """Resolve ``target``, fan the notification out and push to every device."""

    title, message = _ensure_content(title, message)
    recipient_ids = resolve_recipients(session, target)
    if not recipient_ids:
        raise ValidationError("No recipients matched the selection", fields=["recipients"])

    count = fan_out(session, recipient_ids, title=title, message=message, type=type, data=data)
    logger.info("Stored notification %r for %s recipients", title, count)

    report = push_to_users(session, dispatcher, recipient_ids, title=title, body=message, data=data)
    return BulkSendResult(count=count, recipient_ids=frozenset(recipient_ids), dispatch=report)


__all__ = [
    "BulkSendResult",
    "fan_out",
    "push_to_users",
    "send_bulk_notification",
    "send_notification",
]
