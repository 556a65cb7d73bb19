"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import func, insert
from sqlalchemy.orm import Session

from fellowship.domain.entities import Notification, NotificationType
from fellowship.infrastructure.models import NotificationModel
from fellowship.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

DEFAULT_LIST_LIMIT = 50


class NotificationRepository:
    """Provide the fan-out write and read-state operations for notifications."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: int,
        *,
        limit: int | None = DEFAULT_LIST_LIMIT,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: int) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read.is_(False))
            .scalar()
            or 0
        )

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            type=NotificationType(notification.type).value,
            title=notification.title,
            message=notification.message,
            read=notification.read,
            data=notification.data or {},
            created_at=ensure_app_naive_datetime(
                notification.created_at or now_in_app_timezone()
            ),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def bulk_create(
        self,
        recipient_ids: Iterable[int],
        *,
        title: str,
        message: str,
        type: NotificationType = NotificationType.GENERAL,
        data: dict[str, Any] | None = None,
        created_at: datetime | None = None,
    ) -> int:
        """Insert one unread notification per recipient and return the count.

        All rows go out in a single executemany insert; each row gets its own
        identifier and read flag.
        """

        timestamp = ensure_app_naive_datetime(created_at or now_in_app_timezone())
        rows = [
            {
                "user_id": int(user_id),
                "type": NotificationType(type).value,
                "title": title,
                "message": message,
                "read": False,
                "data": dict(data or {}),
                "created_at": timestamp,
            }
            for user_id in recipient_ids
        ]
        if not rows:
            return 0
        self.session.execute(insert(NotificationModel), rows)
        self.session.commit()
        return len(rows)

    def mark_read(self, notification_id: int, *, user_id: int) -> Notification | None:
        """Flip ``read`` to true on a notification owned by ``user_id``.

        Returns ``None`` when no such notification exists for that user. A
        notification that is already read is returned unchanged.
        """

        model = self._get_owned_model(notification_id, user_id=user_id)
        if model is None:
            return None
        if not model.read:
            model.read = True
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_read(self, user_id: int, *, snapshot: datetime | None = None) -> int:
        """Mark every unread notification created up to ``snapshot`` as read."""

        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id,
            NotificationModel.read.is_(False),
        )
        if snapshot is not None:
            query = query.filter(
                NotificationModel.created_at <= ensure_app_naive_datetime(snapshot)
            )
        updated = query.update({NotificationModel.read: True}, synchronize_session=False)
        self.session.commit()
        return int(updated or 0)

    def _get_owned_model(self, notification_id: int, *, user_id: int) -> NotificationModel | None:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.user_id == user_id)
            .first()
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            message=model.message,
            type=NotificationType(model.type),
            read=bool(model.read),
            data=model.data or {},
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["DEFAULT_LIST_LIMIT", "NotificationRepository"]
