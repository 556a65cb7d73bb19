"""ORM models used by the application infrastructure."""

from .device_token import DeviceTokenModel
from .group import GroupModel, group_member_table
from .notification import NotificationModel
from .user import UserModel

__all__ = [
    "DeviceTokenModel",
    "GroupModel",
    "group_member_table",
    "NotificationModel",
    "UserModel",
]
