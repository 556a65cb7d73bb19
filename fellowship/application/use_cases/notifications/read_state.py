"""Use cases reading notifications and moving them from unread to read."""

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from fellowship.application.exceptions import NotFoundError
from fellowship.domain.entities import Notification
from fellowship.infrastructure.repositories import NotificationRepository
from fellowship.utils import now_in_app_timezone


def list_notifications(session: Session, user_id: int) -> Sequence[Notification]:
    """Return the 50 most recent notifications of ``user_id``, newest first."""

    return NotificationRepository(session).list_for_user(user_id)


def count_unread_notifications(session: Session, user_id: int) -> int:
    return NotificationRepository(session).count_unread(user_id)


def mark_notification_read(session: Session, notification_id: int, *, user_id: int) -> Notification:
    """Mark a notification of ``user_id`` as read.

    Marking an already-read notification succeeds without changes. A
    notification owned by someone else is reported exactly like a missing one.
    """

    notification = NotificationRepository(session).mark_read(notification_id, user_id=user_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


def get_notification(session: Session, notification_id: int, *, user_id: int) -> Notification:
    """Return one notification of ``user_id``, marking it read on the way."""

    return mark_notification_read(session, notification_id, user_id=user_id)


def mark_all_notifications_read(
    session: Session, user_id: int, *, snapshot: datetime | None = None
) -> int:
    """Mark every notification created up to ``snapshot`` (default: now) as read."""

    return NotificationRepository(session).mark_all_read(
        user_id, snapshot=snapshot or now_in_app_timezone()
    )
