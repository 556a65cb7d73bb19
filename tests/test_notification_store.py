"""Tests for fan-out writes and read-state transitions."""

from __future__ import annotations

from datetime import timedelta

import pytest

from fellowship.application.exceptions import NotFoundError, ValidationError
from fellowship.application.use_cases.notifications import (
    count_unread_notifications,
    fan_out,
    get_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
    send_bulk_notification,
    send_notification,
)
from fellowship.domain.entities import NotificationType, RecipientTarget
from fellowship.infrastructure.push import PushDispatcher
from fellowship.infrastructure.repositories import (
    DeviceTokenRepository,
    NotificationRepository,
)
from fellowship.utils import now_in_app_timezone


def test_fan_out_writes_one_unread_record_per_recipient(session, make_user) -> None:
    users = [make_user() for _ in range(3)]

    count = fan_out(
        session,
        [user.id for user in users],
        title="Prayer meeting",
        message="Wednesday 7pm",
        type=NotificationType.MEETING,
        data={"room": "Hall B"},
    )

    assert count == 3
    records = [list_notifications(session, user.id)[0] for user in users]
    assert len({record.id for record in records}) == 3
    assert all(record.read is False for record in records)
    assert all(record.type is NotificationType.MEETING for record in records)
    assert all(record.data == {"room": "Hall B"} for record in records)


def test_marking_one_recipient_read_leaves_others_unread(session, make_user) -> None:
    first, second = make_user(), make_user()
    fan_out(session, [first.id, second.id], title="Update", message="New schedule")
    notification = list_notifications(session, first.id)[0]

    mark_notification_read(session, notification.id, user_id=first.id)

    assert count_unread_notifications(session, first.id) == 0
    assert count_unread_notifications(session, second.id) == 1


def test_list_returns_fifty_newest_first(session, make_user) -> None:
    user = make_user()
    repository = NotificationRepository(session)
    start = now_in_app_timezone() - timedelta(hours=2)
    for minute in range(60):
        repository.bulk_create(
            [user.id],
            title=f"Notice {minute}",
            message="Body",
            created_at=start + timedelta(minutes=minute),
        )

    notifications = list_notifications(session, user.id)

    assert len(notifications) == 50
    assert notifications[0].title == "Notice 59"
    assert notifications[-1].title == "Notice 10"
    created = [notification.created_at for notification in notifications]
    assert created == sorted(created, reverse=True)


def test_mark_read_is_idempotent(session, make_user) -> None:
    user = make_user()
    fan_out(session, [user.id], title="Reminder", message="Bring a Bible")
    notification_id = list_notifications(session, user.id)[0].id

    first = mark_notification_read(session, notification_id, user_id=user.id)
    second = mark_notification_read(session, notification_id, user_id=user.id)

    assert first.read is True
    assert second == first


def test_other_users_notification_is_not_found(session, make_user) -> None:
    owner, stranger = make_user(), make_user()
    fan_out(session, [owner.id], title="Private", message="Only for the owner")
    notification_id = list_notifications(session, owner.id)[0].id

    with pytest.raises(NotFoundError):
        mark_notification_read(session, notification_id, user_id=stranger.id)
    with pytest.raises(NotFoundError):
        get_notification(session, notification_id, user_id=stranger.id)
    assert list_notifications(session, owner.id)[0].read is False


def test_get_notification_marks_it_read(session, make_user) -> None:
    user = make_user()
    fan_out(session, [user.id], title="Hello", message="World")
    notification_id = list_notifications(session, user.id)[0].id

    notification = get_notification(session, notification_id, user_id=user.id)

    assert notification.read is True


def test_mark_all_read_only_touches_notifications_up_to_snapshot(session, make_user) -> None:
    user, other = make_user(), make_user()
    repository = NotificationRepository(session)
    snapshot = now_in_app_timezone()
    repository.bulk_create(
        [user.id, other.id], title="Old", message="Before", created_at=snapshot - timedelta(minutes=5)
    )
    repository.bulk_create(
        [user.id], title="New", message="After", created_at=snapshot + timedelta(minutes=5)
    )

    updated = mark_all_notifications_read(session, user.id, snapshot=snapshot)

    assert updated == 1
    by_title = {n.title: n.read for n in list_notifications(session, user.id)}
    assert by_title == {"Old": True, "New": False}
    assert count_unread_notifications(session, other.id) == 1


def test_bulk_send_counts_recipients_and_pushes_every_device(
    session, make_user, push_client, expo_token
) -> None:
    with_two_devices, without_devices = make_user(), make_user()
    tokens = DeviceTokenRepository(session)
    tokens.register(user_id=with_two_devices.id, token=expo_token("phone"), device_id="phone")
    tokens.register(user_id=with_two_devices.id, token=expo_token("tablet"), device_id="tablet")

    result = send_bulk_notification(
        session,
        target=RecipientTarget.users([with_two_devices.id, without_devices.id]),
        title="Service moved",
        message="We meet at 11 this Sunday",
        dispatcher=PushDispatcher(push_client),
    )

    assert result.count == 2
    assert result.dispatch.attempted == 2
    assert sorted(push_client.sent_tokens) == [expo_token("phone"), expo_token("tablet")]
    assert count_unread_notifications(session, without_devices.id) == 1


def test_push_failure_does_not_undo_stored_notifications(
    session, make_user, push_client_factory, expo_token
) -> None:
    user = make_user()
    DeviceTokenRepository(session).register(user_id=user.id, token=expo_token(1), device_id="phone")
    client = push_client_factory(failing_batches=[0])

    result = send_bulk_notification(
        session,
        target=RecipientTarget.all_users(),
        title="Outage",
        message="Push is down",
        dispatcher=PushDispatcher(client),
    )

    assert result.count == 1
    assert result.dispatch.failed == 1
    assert count_unread_notifications(session, user.id) == 1


def test_bulk_send_without_recipients_is_rejected(session) -> None:
    with pytest.raises(ValidationError) as excinfo:
        send_bulk_notification(
            session, target=RecipientTarget.groups([1]), title="Hi", message="Nobody"
        )

    assert excinfo.value.fields == ("recipients",)


def test_blank_title_is_rejected_before_writing(session, make_user) -> None:
    user = make_user()

    with pytest.raises(ValidationError):
        send_notification(session, user_id=user.id, title="  ", message="Body")

    assert list_notifications(session, user.id) == []


def test_send_single_to_unknown_user_is_not_found(session) -> None:
    with pytest.raises(NotFoundError):
        send_notification(session, user_id=999, title="Hi", message="There")


def test_send_single_to_inactive_user_is_not_found(session, make_user) -> None:
    inactive = make_user(is_active=False)

    with pytest.raises(NotFoundError):
        send_notification(session, user_id=inactive.id, title="Hi", message="There")

    assert list_notifications(session, inactive.id) == []
