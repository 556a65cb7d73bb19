"""Tests for the Expo HTTP client using a mocked transport."""

from __future__ import annotations

import json

import httpx
import pytest

from fellowship.domain.entities import PushMessage, TicketStatus
from fellowship.infrastructure.push import ExpoPushClient, PushProviderError

PUSH_URL = "https://push.example.test/send"


def _client(handler) -> ExpoPushClient:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return ExpoPushClient(url=PUSH_URL, access_token="expo-secret", http_client=http_client)


def _messages(count: int) -> list[PushMessage]:
    return [
        PushMessage(to=f"ExponentPushToken[{index}]", title="Hi", body="There")
        for index in range(count)
    ]


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("ExponentPushToken[xxxxxxxxxxxxxxxxxxxxxx]", True),
        ("ExpoPushToken[abc]", True),
        ("0b9e4a3c-1d2f-4e5a-9b8c-7d6e5f4a3b2c", True),
        ("ExponentPushToken[]", False),
        ("fcm:token", False),
        ("", False),
    ],
)
def test_is_valid_token(token: str, expected: bool) -> None:
    assert ExpoPushClient.is_valid_token(token) is expected


def test_send_posts_payload_and_maps_tickets() -> None:
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["payload"] = json.loads(request.content)
        captured["authorization"] = request.headers.get("Authorization")
        return httpx.Response(
            200,
            json={
                "data": [
                    {"status": "ok", "id": "ticket-1"},
                    {
                        "status": "error",
                        "message": "not registered",
                        "details": {"error": "DeviceNotRegistered"},
                    },
                ]
            },
        )

    tickets = _client(handler).send(_messages(2))

    assert captured["authorization"] == "Bearer expo-secret"
    assert captured["payload"][0] == {
        "to": "ExponentPushToken[0]",
        "title": "Hi",
        "body": "There",
        "data": {},
        "sound": "default",
        "priority": "high",
        "badge": 1,
    }
    assert tickets[0].status is TicketStatus.OK
    assert tickets[0].ticket_id == "ticket-1"
    assert tickets[1].is_error
    assert tickets[1].error_detail == {"error": "DeviceNotRegistered"}


def test_missing_tickets_become_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": [{"status": "ok", "id": "only-one"}]})

    tickets = _client(handler).send(_messages(2))

    assert [ticket.is_error for ticket in tickets] == [False, True]


def test_request_level_rejection_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errors": [{"code": "VALIDATION_ERROR"}]})

    with pytest.raises(PushProviderError):
        _client(handler).send(_messages(1))


def test_http_error_status_propagates() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={})

    with pytest.raises(httpx.HTTPStatusError):
        _client(handler).send(_messages(1))


def test_batches_over_the_provider_limit_are_refused() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - never called
        raise AssertionError("request should not be sent")

    with pytest.raises(ValueError):
        _client(handler).send(_messages(101))
