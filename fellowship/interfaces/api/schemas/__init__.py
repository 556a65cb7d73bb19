from .auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    Token,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from .common import ActionResponse, CamelModel, ErrorResponse
from .notification import (
    BulkNotificationCreate,
    BulkNotificationSendResponse,
    DeviceTokenRegister,
    NotificationCreate,
    NotificationRead,
    NotificationSendResponse,
    UnreadCountResponse,
)

__all__ = [
    "ActionResponse",
    "BulkNotificationCreate",
    "BulkNotificationSendResponse",
    "CamelModel",
    "ChangePasswordRequest",
    "DeviceTokenRegister",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "NotificationCreate",
    "NotificationRead",
    "NotificationSendResponse",
    "ResetPasswordRequest",
    "Token",
    "UnreadCountResponse",
    "VerifyOtpRequest",
    "VerifyOtpResponse",
]
