"""Use cases for sending and reading notifications."""

from .read_state import (
    count_unread_notifications,
    get_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from .register_device_token import register_device_token
from .resolve_recipients import resolve_recipients
from .send_notifications import (
    BulkSendResult,
    fan_out,
    push_to_users,
    send_bulk_notification,
    send_notification,
)

__all__ = [
    "BulkSendResult",
    "count_unread_notifications",
    "fan_out",
    "get_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "push_to_users",
    "register_device_token",
    "resolve_recipients",
    "send_bulk_notification",
    "send_notification",
]
