"""Domain entity representing a directory user."""

from dataclasses import dataclass, field
from datetime import datetime

from .device_token import DeviceToken
from .reset_attempt import ResetAttemptState

ROLE_ADMIN = "admin"
ROLE_USER = "user"


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    name: str
    email: str
    password: str
    role: str = ROLE_USER
    is_active: bool = True
    created_at: datetime | None = None
    device_tokens: list[DeviceToken] = field(default_factory=list)
    reset_state: ResetAttemptState = field(default_factory=ResetAttemptState)

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.role.lower() == ROLE_ADMIN
