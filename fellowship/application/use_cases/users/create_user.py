"""Use case for creating users."""

from sqlalchemy.orm import Session

from fellowship.domain.entities import ROLE_ADMIN, ROLE_USER, User
from fellowship.infrastructure.repositories import UserRepository
from fellowship.infrastructure.security import get_password_hash
from fellowship.utils import now_in_app_timezone

from .password_reset import ensure_valid_password


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
) -> User:
    """Create a new user ensuring unique email addresses."""

    repository = UserRepository(session)
    normalized_email = email.strip().lower()
    if "@" not in normalized_email:
        raise ValueError("A valid email address is required")
    if repository.get_by_email(normalized_email):
        raise ValueError("Email is already registered")
    if role not in (ROLE_ADMIN, ROLE_USER):
        raise ValueError("Role must be 'admin' or 'user'")
    ensure_valid_password(password)

    user = User(
        id=None,
        name=name.strip(),
        email=normalized_email,
        password=get_password_hash(password),
        role=role,
        is_active=True,
        created_at=now_in_app_timezone(),
    )
    return repository.create(user)
