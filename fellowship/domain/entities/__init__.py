"""Domain entities exposed by the application."""

from .device_token import DeliveryTarget, DeviceToken
from .dispatch import DispatchReport, DispatchTicket, PushMessage, TicketStatus
from .group import Group, GroupMember, MemberReference, PopulatedMember, member_user_id
from .notification import Notification, NotificationType
from .recipients import RecipientTarget, TargetKind
from .reset_attempt import ResetAttemptState, ResetPolicy, ThrottleDecision
from .user import ROLE_ADMIN, ROLE_USER, User

__all__ = [
    "DeliveryTarget",
    "DeviceToken",
    "DispatchReport",
    "DispatchTicket",
    "PushMessage",
    "TicketStatus",
    "Group",
    "GroupMember",
    "MemberReference",
    "PopulatedMember",
    "member_user_id",
    "Notification",
    "NotificationType",
    "RecipientTarget",
    "TargetKind",
    "ResetAttemptState",
    "ResetPolicy",
    "ThrottleDecision",
    "ROLE_ADMIN",
    "ROLE_USER",
    "User",
]
