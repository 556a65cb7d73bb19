"""End-to-end tests for the notification endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from fellowship.infrastructure.push import PushDispatcher
from fellowship.infrastructure.repositories import (
    DeviceTokenRepository,
    GroupRepository,
    NotificationRepository,
)
from fellowship.interfaces.api.dependencies import get_dispatcher
from main import create_app


@pytest.fixture
def client(push_client):
    app = create_app()
    app.dependency_overrides[get_dispatcher] = lambda: PushDispatcher(push_client)
    return TestClient(app)


def test_send_bulk_persists_per_recipient_and_pushes_each_device(
    client, session, make_admin, make_user, push_client, auth_headers, expo_token
) -> None:
    admin = make_admin()
    with_devices, without_devices = make_user(), make_user()
    tokens = DeviceTokenRepository(session)
    tokens.register(user_id=with_devices.id, token=expo_token("phone"), device_id="phone")
    tokens.register(user_id=with_devices.id, token=expo_token("tablet"), device_id="tablet")

    response = client.post(
        "/notifications/send-bulk",
        json={
            "title": "Picnic",
            "message": "Saturday at the park",
            "recipients": [with_devices.id, without_devices.id],
            "type": "meeting",
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Notification sent to 2 users",
        "count": 2,
    }
    notifications = NotificationRepository(session)
    assert len(notifications.list_for_user(with_devices.id)) == 1
    assert len(notifications.list_for_user(without_devices.id)) == 1
    assert sorted(push_client.sent_tokens) == [expo_token("phone"), expo_token("tablet")]


def test_send_bulk_to_groups_counts_shared_members_once(
    client, session, make_admin, make_user, auth_headers
) -> None:
    admin = make_admin()
    first, second = make_user(), make_user()
    groups = GroupRepository(session)
    youth = groups.create(name="Youth", member_ids=[first.id, second.id])
    choir = groups.create(name="Choir", member_ids=[second.id])

    response = client.post(
        "/notifications/send-bulk",
        json={"title": "Rehearsal", "message": "Thursday", "groupIds": [youth.id, choir.id]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["count"] == 2


def test_send_bulk_with_no_resolved_recipients_is_rejected(
    client, make_admin, auth_headers
) -> None:
    admin = make_admin()

    response = client.post(
        "/notifications/send-bulk",
        json={"title": "Hello", "message": "Anyone?", "groupIds": [9999]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["detail"]["fields"] == ["recipients"]


def test_send_bulk_requires_exactly_one_target(client, make_admin, auth_headers) -> None:
    admin = make_admin()

    response = client.post(
        "/notifications/send-bulk",
        json={"title": "Hello", "message": "Body", "recipients": [1], "allUsers": True},
        headers=auth_headers(admin),
    )

    assert response.status_code == 422


def test_send_endpoints_require_admin(client, make_user, auth_headers) -> None:
    member = make_user()

    response = client.post(
        "/notifications/send-single",
        json={"title": "Hi", "message": "There", "userId": member.id},
        headers=auth_headers(member),
    )

    assert response.status_code == 403


def test_send_single_returns_the_stored_notification(
    client, make_admin, make_user, auth_headers
) -> None:
    admin, member = make_admin(), make_user()

    response = client.post(
        "/notifications/send-single",
        json={"title": "Welcome", "message": "Glad you joined", "userId": member.id},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    notification = response.json()["notification"]
    assert notification["userId"] == member.id
    assert notification["read"] is False
    assert notification["type"] == "general"
    assert "createdAt" in notification


def test_send_single_to_unknown_user_is_not_found(client, make_admin, auth_headers) -> None:
    admin = make_admin()

    response = client.post(
        "/notifications/send-single",
        json={"title": "Hi", "message": "There", "userId": 4242},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404


def test_register_token_then_read_flow(
    client, session, make_user, auth_headers, expo_token
) -> None:
    member = make_user()
    headers = auth_headers(member)

    registered = client.post(
        "/notifications/register-token",
        json={"token": expo_token("abc"), "deviceId": "phone"},
        headers=headers,
    )
    assert registered.status_code == 200
    assert registered.json() == {"success": True, "message": "Push token registered"}

    NotificationRepository(session).bulk_create([member.id], title="One", message="First")
    NotificationRepository(session).bulk_create([member.id], title="Two", message="Second")

    assert client.get("/notifications/unread-count", headers=headers).json() == {"count": 2}

    listed = client.get("/notifications/", headers=headers).json()
    assert len(listed) == 2

    detail = client.get(f"/notifications/{listed[0]['id']}", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["read"] is True

    read_all = client.put("/notifications/read-all", headers=headers)
    assert read_all.status_code == 200
    assert client.get("/notifications/unread-count", headers=headers).json() == {"count": 0}


def test_reading_another_users_notification_is_not_found(
    client, session, make_user, auth_headers
) -> None:
    owner, stranger = make_user(), make_user()
    NotificationRepository(session).bulk_create([owner.id], title="Mine", message="Private")
    notification_id = NotificationRepository(session).list_for_user(owner.id)[0].id

    response = client.put(
        f"/notifications/{notification_id}/read", headers=auth_headers(stranger)
    )

    assert response.status_code == 404


def test_requests_without_token_are_unauthorized(client) -> None:
    assert client.get("/notifications/").status_code == 401
