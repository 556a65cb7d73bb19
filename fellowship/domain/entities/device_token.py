"""Domain entities describing push delivery endpoints."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeviceToken:
    """Push token registered by one installed app instance of a user."""

    token: str
    device_id: str


@dataclass(frozen=True)
class DeliveryTarget:
    """A push token together with the user it belongs to, when known."""

    token: str
    user_id: int | None = None
    device_id: str | None = None


__all__ = ["DeliveryTarget", "DeviceToken"]
