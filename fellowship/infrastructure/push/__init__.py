"""Push notification delivery through the Expo service."""

from __future__ import annotations

from functools import lru_cache

from fellowship.config import get_settings

from .dispatcher import PushClient, PushDispatcher, chunked
from .expo_client import ExpoPushClient, PushProviderError


@lru_cache
def get_push_dispatcher() -> PushDispatcher:
    """Return the shared dispatcher configured from settings."""

    settings = get_settings()
    client = ExpoPushClient(
        url=settings.expo_push_url,
        access_token=settings.expo_access_token,
        timeout=settings.push_timeout_seconds,
    )
    return PushDispatcher(client, batch_size=settings.push_batch_size)


def close_push_dispatcher() -> None:
    """Release the HTTP client held by the shared dispatcher, if any."""

    if get_push_dispatcher.cache_info().currsize:
        get_push_dispatcher().close()
        get_push_dispatcher.cache_clear()


__all__ = [
    "ExpoPushClient",
    "PushClient",
    "PushDispatcher",
    "PushProviderError",
    "chunked",
    "close_push_dispatcher",
    "get_push_dispatcher",
]
