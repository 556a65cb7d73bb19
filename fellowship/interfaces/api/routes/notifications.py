"""Endpoints to send, list and acknowledge notifications."""

from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fellowship.application.exceptions import NotFoundError, ValidationError
from fellowship.application.use_cases.notifications import (
    count_unread_notifications,
    get_notification,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read,
    mark_notification_read,
    register_device_token,
    send_bulk_notification,
    send_notification,
)
from fellowship.domain.entities import Notification, User
from fellowship.infrastructure.database import get_db
from fellowship.infrastructure.push import PushDispatcher
from fellowship.interfaces.api.dependencies import (
    get_current_active_user,
    get_dispatcher,
    require_admin,
)
from fellowship.interfaces.api.schemas import (
    ActionResponse,
    BulkNotificationCreate,
    BulkNotificationSendResponse,
    DeviceTokenRegister,
    NotificationCreate,
    NotificationRead,
    NotificationSendResponse,
    UnreadCountResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


def _raise_http(exc: ValueError) -> NoReturn:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc), "fields": list(exc.fields)},
        ) from exc
    raise exc


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return the 50 most recent notifications of the authenticated user."""

    notifications = list_notifications_uc(db, current_user.id)
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountResponse:
    return UnreadCountResponse(count=count_unread_notifications(db, current_user.id))


@router.put("/read-all", response_model=ActionResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ActionResponse:
    """Mark every unread notification of the authenticated user as read."""

    updated = mark_all_notifications_read(db, current_user.id)
    return ActionResponse(message=f"{updated} notifications marked as read")


@router.get("/{notification_id}", response_model=NotificationRead)
def read_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    """Return one notification and mark it as read."""

    try:
        notification = get_notification(db, notification_id, user_id=current_user.id)
    except ValueError as exc:
        _raise_http(exc)
    return _notification_to_schema(notification)


@router.put("/{notification_id}/read", response_model=NotificationSendResponse)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationSendResponse:
    try:
        notification = mark_notification_read(db, notification_id, user_id=current_user.id)
    except ValueError as exc:
        _raise_http(exc)
    return NotificationSendResponse(notification=_notification_to_schema(notification))


@router.post("/register-token", response_model=ActionResponse)
def register_token(
    payload: DeviceTokenRegister,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ActionResponse:
    """Store the push token of the device the user is signed in on."""

    try:
        register_device_token(
            db, user_id=current_user.id, token=payload.token, device_id=payload.device_id
        )
    except ValueError as exc:
        _raise_http(exc)
    return ActionResponse(message="Push token registered")


@router.post("/send-single", response_model=NotificationSendResponse)
def send_single(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
    _: User = Depends(require_admin),
) -> NotificationSendResponse:
    try:
        notification = send_notification(
            db,
            user_id=payload.user_id,
            title=payload.title,
            message=payload.message,
            type=payload.type,
            data=payload.data,
            dispatcher=dispatcher,
        )
    except ValueError as exc:
        _raise_http(exc)
    return NotificationSendResponse(notification=_notification_to_schema(notification))


@router.post("/send-bulk", response_model=BulkNotificationSendResponse)
def send_bulk(
    payload: BulkNotificationCreate,
    db: Session = Depends(get_db),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(require_admin),
) -> BulkNotificationSendResponse:
    try:
        result = send_bulk_notification(
            db,
            target=payload.to_target(),
            title=payload.title,
            message=payload.message,
            type=payload.type,
            data=payload.data,
            dispatcher=dispatcher,
        )
    except ValueError as exc:
        _raise_http(exc)

    logger.info(
        "Administrator %s sent %r to %s users", current_user.id, payload.title, result.count
    )
    return BulkNotificationSendResponse(
        message=f"Notification sent to {result.count} users",
        count=result.count,
    )
