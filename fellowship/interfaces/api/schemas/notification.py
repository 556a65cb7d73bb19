"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from fellowship.domain.entities import NotificationType, RecipientTarget

from .common import CamelModel


class NotificationRead(CamelModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    title: str
    message: str
    type: NotificationType
    read: bool
    data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class NotificationCreate(CamelModel):
    """Payload used by administrators to notify a single user."""

    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    user_id: int
    type: NotificationType = NotificationType.GENERAL
    data: dict[str, Any] | None = None


class BulkNotificationCreate(CamelModel):
    """Payload used to notify many users at once.

    Exactly one of ``recipients``, ``groupIds`` or ``allUsers`` selects who
    receives the notification.
    """

    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    recipients: list[int] | None = Field(default=None, min_length=1)
    group_ids: list[int] | None = Field(default=None, min_length=1)
    all_users: bool = False
    type: NotificationType = NotificationType.GENERAL
    data: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _validate_single_target(self) -> "BulkNotificationCreate":
        selected = sum(
            (self.recipients is not None, self.group_ids is not None, self.all_users)
        )
        if selected != 1:
            raise ValueError(
                "Provide exactly one of recipients, groupIds or allUsers"
            )
        return self

    def to_target(self) -> RecipientTarget:
        if self.all_users:
            return RecipientTarget.all_users()
        if self.group_ids is not None:
            return RecipientTarget.groups(self.group_ids)
        return RecipientTarget.users(self.recipients or [])


class NotificationSendResponse(CamelModel):
    success: bool = True
    notification: NotificationRead


class BulkNotificationSendResponse(CamelModel):
    success: bool = True
    message: str
    count: int


class DeviceTokenRegister(CamelModel):
    token: str = Field(..., min_length=1, max_length=255)
    device_id: str = Field(..., min_length=1, max_length=255)


class UnreadCountResponse(CamelModel):
    count: int


__all__ = [
    "BulkNotificationCreate",
    "BulkNotificationSendResponse",
    "DeviceTokenRegister",
    "NotificationCreate",
    "NotificationRead",
    "NotificationSendResponse",
    "UnreadCountResponse",
]
