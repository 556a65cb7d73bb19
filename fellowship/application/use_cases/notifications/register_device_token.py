"""Use case storing the push token of one of the user's devices."""

from sqlalchemy.orm import Session

from fellowship.application.exceptions import NotFoundError, ValidationError
from fellowship.domain.entities import DeviceToken
from fellowship.infrastructure.repositories import DeviceTokenRepository, UserRepository


def register_device_token(
    session: Session, *, user_id: int, token: str, device_id: str
) -> DeviceToken:
    """Register ``token`` for ``device_id``, replacing any older token of that device."""

    token = (token or "").strip()
    device_id = (device_id or "").strip()
    missing = [name for name, value in (("token", token), ("deviceId", device_id)) if not value]
    if missing:
        raise ValidationError(
            f"Missing required field(s): {', '.join(missing)}", fields=missing
        )

    if UserRepository(session).get(user_id) is None:
        raise NotFoundError("User not found")

    return DeviceTokenRepository(session).register(
        user_id=user_id, token=token, device_id=device_id
    )
