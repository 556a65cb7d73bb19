"""Persistence helpers for push delivery tokens."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fellowship.domain.entities import DeliveryTarget, DeviceToken
from fellowship.infrastructure.models import DeviceTokenModel
from fellowship.utils import now_in_app_naive_datetime

_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class DeviceTokenRepository:
    """Registry of the push endpoints each user has registered."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def register(self, *, user_id: int, token: str, device_id: str) -> DeviceToken:
        """Store ``token`` in the ``(user_id, device_id)`` slot, replacing any older one.

        The slot is written with a single upsert where the backend supports
        it. A concurrent register that wins the unique index first turns the
        write into an update of the row it created.
        """

        values = {
            "user_id": user_id,
            "device_id": device_id,
            "token": token,
            "updated_at": now_in_app_naive_datetime(),
        }
        try:
            try:
                self._write_slot(values)
            except IntegrityError:
                self.session.rollback()
                self._update_slot(values)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return DeviceToken(token=token, device_id=device_id)

    def _write_slot(self, values: dict[str, Any]) -> None:
        dialect_insert = _UPSERT_INSERTS.get(self.session.get_bind().dialect.name)
        if dialect_insert is None:
            if not self._update_slot(values):
                self.session.execute(insert(DeviceTokenModel).values(**values))
            return

        statement = dialect_insert(DeviceTokenModel).values(**values)
        self.session.execute(
            statement.on_conflict_do_update(
                index_elements=[DeviceTokenModel.user_id, DeviceTokenModel.device_id],
                set_={"token": values["token"], "updated_at": values["updated_at"]},
            )
        )

    def _update_slot(self, values: dict[str, Any]) -> int:
        return (
            self.session.query(DeviceTokenModel)
            .filter(
                DeviceTokenModel.user_id == values["user_id"],
                DeviceTokenModel.device_id == values["device_id"],
            )
            .update(
                {
                    DeviceTokenModel.token: values["token"],
                    DeviceTokenModel.updated_at: values["updated_at"],
                },
                synchronize_session=False,
            )
        )

    def list_for_user(self, user_id: int) -> list[DeviceToken]:
        query = (
            self.session.query(DeviceTokenModel)
            .filter(DeviceTokenModel.user_id == user_id)
            .order_by(DeviceTokenModel.id)
        )
        return [DeviceToken(token=model.token, device_id=model.device_id) for model in query.all()]

    def tokens_for(self, user_ids: Iterable[int]) -> list[DeliveryTarget]:
        """Return every token registered by ``user_ids``, tagged with its owner."""

        unique_ids = {int(user_id) for user_id in user_ids}
        if not unique_ids:
            return []
        query = self.session.query(
            DeviceTokenModel.user_id, DeviceTokenModel.device_id, DeviceTokenModel.token
        ).filter(DeviceTokenModel.user_id.in_(unique_ids))
        return [
            DeliveryTarget(token=token, user_id=user_id, device_id=device_id)
            for user_id, device_id, token in query.all()
        ]


__all__ = ["DeviceTokenRepository"]
