"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from fellowship.domain.entities import DeviceToken, ResetAttemptState, User
from fellowship.infrastructure.models import UserModel
from fellowship.utils import ensure_app_naive_datetime, ensure_app_timezone


class UserRepository:
    """Provide the user reads and writes needed by the notification core."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        normalized = email.strip().lower()
        model = self.session.query(UserModel).filter(UserModel.email == normalized).first()
        return self._to_entity(model) if model else None

    def list_active_ids(self) -> set[int]:
        query = self.session.query(UserModel.id).filter(UserModel.is_active.is_(True))
        return {user_id for (user_id,) in query.all()}

    def filter_existing_ids(self, user_ids: Iterable[int]) -> set[int]:
        """Return the subset of ``user_ids`` that belong to active users."""

        unique_ids = {int(user_id) for user_id in user_ids}
        if not unique_ids:
            return set()
        query = (
            self.session.query(UserModel.id)
            .filter(UserModel.id.in_(unique_ids))
            .filter(UserModel.is_active.is_(True))
        )
        return {user_id for (user_id,) in query.all()}

    def create(self, user: User) -> User:
        model = UserModel(
            name=user.name,
            email=user.email.strip().lower(),
            password=user.password,
            role=user.role,
            is_active=user.is_active,
        )
        if user.created_at is not None:
            model.created_at = ensure_app_naive_datetime(user.created_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def save_reset_state(self, user_id: int, state: ResetAttemptState) -> None:
        """Persist the embedded reset attempt fields in a single update."""

        model = self._require_model(user_id)
        self._apply_reset_state(model, state)
        self.session.add(model)
        self.session.commit()

    def update_password(
        self,
        user_id: int,
        hashed_password: str,
        *,
        reset_state: ResetAttemptState | None = None,
    ) -> User:
        """Store a new password hash, optionally replacing the reset state too."""

        model = self._require_model(user_id)
        model.password = hashed_password
        if reset_state is not None:
            self._apply_reset_state(model, reset_state)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _require_model(self, user_id: int) -> UserModel:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        return model

    @staticmethod
    def _apply_reset_state(model: UserModel, state: ResetAttemptState) -> None:
        model.reset_otp_hash = state.otp_hash
        model.reset_otp_expires_at = ensure_app_naive_datetime(state.otp_expires_at)
        model.reset_attempt_count = state.attempt_count
        model.reset_last_attempt_at = ensure_app_naive_datetime(state.last_attempt_at)
        model.reset_failed_verifications = state.failed_verifications

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            role=model.role,
            is_active=model.is_active,
            created_at=ensure_app_timezone(model.created_at),
            device_tokens=[
                DeviceToken(token=token.token, device_id=token.device_id)
                for token in model.device_tokens
            ],
            reset_state=ResetAttemptState(
                otp_hash=model.reset_otp_hash,
                otp_expires_at=ensure_app_timezone(model.reset_otp_expires_at),
                attempt_count=model.reset_attempt_count or 0,
                last_attempt_at=ensure_app_timezone(model.reset_last_attempt_at),
                failed_verifications=model.reset_failed_verifications or 0,
            ),
        )


__all__ = ["UserRepository"]
