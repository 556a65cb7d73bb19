"""Value objects produced while delivering push notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TicketStatus(str, Enum):
    OK = "ok"
    ERROR = "error"


@dataclass(frozen=True)
class PushMessage:
    """One provider message addressed to a single token."""

    to: str
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)
    sound: str = "default"
    priority: str = "high"
    badge: int = 1

    def as_payload(self) -> dict[str, Any]:
        return {
            "to": self.to,
            "title": self.title,
            "body": self.body,
            "data": self.data,
            "sound": self.sound,
            "priority": self.priority,
            "badge": self.badge,
        }


@dataclass(frozen=True)
class DispatchTicket:
    """Outcome of sending one message to one token. Never persisted."""

    token: str
    status: TicketStatus
    ticket_id: str | None = None
    message: str | None = None
    error_detail: dict[str, Any] | None = None

    @property
    def is_error(self) -> bool:
        return self.status is TicketStatus.ERROR


@dataclass
class DispatchReport:
    """Aggregated counters for one dispatch call."""

    attempted: int = 0
    sent: int = 0
    failed: int = 0
    invalid: int = 0
    batches: int = 0


__all__ = [
    "DispatchReport",
    "DispatchTicket",
    "PushMessage",
    "TicketStatus",
]
