"""Use case letting a signed-in user replace their password."""

from sqlalchemy.orm import Session

from fellowship.application.exceptions import InvalidCredentialsError, NotFoundError
from fellowship.domain.entities import User
from fellowship.infrastructure.repositories import UserRepository
from fellowship.infrastructure.security import get_password_hash, verify_password

from .password_reset import ensure_valid_password


def change_password(
    session: Session, *, user_id: int, old_password: str, new_password: str
) -> User:
    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    if not verify_password(old_password, user.password):
        raise InvalidCredentialsError("Current password is incorrect")
    ensure_valid_password(new_password)
    return repository.update_password(user.id, get_password_hash(new_password))
