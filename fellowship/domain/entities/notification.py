"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """Categories an administrator can pick when sending a notification."""

    MEETING = "meeting"
    MESSAGE = "message"
    REMINDER = "reminder"
    UPDATE = "update"
    GENERAL = "general"


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: int
    title: str
    message: str
    type: NotificationType = NotificationType.GENERAL
    read: bool = False
    data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None


__all__ = ["Notification", "NotificationType"]
