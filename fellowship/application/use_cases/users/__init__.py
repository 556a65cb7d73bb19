"""Use cases for managing users and their credentials."""

from .authenticate_user import AuthenticationStatus, authenticate_user
from .change_password import change_password
from .create_user import create_user
from .password_reset import (
    request_password_reset,
    reset_password,
    reset_policy_from_settings,
    verify_password_reset_otp,
)

__all__ = [
    "AuthenticationStatus",
    "authenticate_user",
    "change_password",
    "create_user",
    "request_password_reset",
    "reset_password",
    "reset_policy_from_settings",
    "verify_password_reset_otp",
]
