"""HTTP client for the Expo push notification service."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

import httpx

from fellowship.config import EXPO_MAX_BATCH_SIZE, EXPO_PUSH_API_URL
from fellowship.domain.entities import DispatchTicket, PushMessage, TicketStatus

logger = logging.getLogger(__name__)

_EXPO_TOKEN_PATTERN = re.compile(r"^(?:ExponentPushToken|ExpoPushToken)\[.+\]$")
_LEGACY_UUID_TOKEN_PATTERN = re.compile(
    r"^[a-z\d]{8}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{12}$", re.IGNORECASE
)


class PushProviderError(Exception):
    """Raised when the provider rejects a whole request."""


class ExpoPushClient:
    """Send batches of push messages to Expo and translate its tickets."""

    max_batch_size = EXPO_MAX_BATCH_SIZE

    def __init__(
        self,
        *,
        url: str = EXPO_PUSH_API_URL,
        access_token: str | None = None,
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._url = url
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)
        self._headers = headers

    @staticmethod
    def is_valid_token(token: str) -> bool:
        """Return ``True`` when ``token`` has the shape of an Expo push token."""

        if not isinstance(token, str):
            return False
        return bool(
            _EXPO_TOKEN_PATTERN.match(token) or _LEGACY_UUID_TOKEN_PATTERN.match(token)
        )

    def send(self, messages: Sequence[PushMessage]) -> list[DispatchTicket]:
        """Send one batch and return one ticket per message, in order.

        Transport failures and HTTP error statuses propagate as ``httpx``
        exceptions; a request-level rejection raises :class:`PushProviderError`.
        """

        if len(messages) > self.max_batch_size:
            msg = (
                f"Batch of {len(messages)} messages exceeds the provider limit of "
                f"{self.max_batch_size}"
            )
            raise ValueError(msg)
        if not messages:
            return []

        response = self._client.post(
            self._url,
            json=[message.as_payload() for message in messages],
            headers=self._headers,
        )
        response.raise_for_status()
        body = response.json()

        data = body.get("data") if isinstance(body, dict) else None
        if data is None:
            errors = body.get("errors") if isinstance(body, dict) else body
            raise PushProviderError(f"Expo rejected the request: {errors}")
        if isinstance(data, dict):
            data = [data]

        return [
            self._to_ticket(message.to, data[index] if index < len(data) else None)
            for index, message in enumerate(messages)
        ]

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ExpoPushClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @staticmethod
    def _to_ticket(token: str, item: Any) -> DispatchTicket:
        if not isinstance(item, dict):
            return DispatchTicket(
                token=token,
                status=TicketStatus.ERROR,
                message="Provider returned no ticket for this message",
            )
        if item.get("status") == TicketStatus.OK.value:
            return DispatchTicket(token=token, status=TicketStatus.OK, ticket_id=item.get("id"))
        details = item.get("details")
        return DispatchTicket(
            token=token,
            status=TicketStatus.ERROR,
            message=item.get("message"),
            error_detail=details if isinstance(details, dict) else None,
        )


__all__ = ["ExpoPushClient", "PushProviderError"]
