"""Repository implementations for persistence operations."""

from .device_token_repository import DeviceTokenRepository
from .group_repository import GroupRepository
from .notification_repository import NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "DeviceTokenRepository",
    "GroupRepository",
    "NotificationRepository",
    "UserRepository",
]
