"""Shared fixtures: a throwaway SQLite database and an in-memory push client."""

from __future__ import annotations

import os
import sys
import tempfile
from collections.abc import Sequence
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "fellowship_api_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

from fellowship.config import get_settings  # noqa: E402

get_settings.cache_clear()

from fellowship.domain.entities import (  # noqa: E402
    ROLE_ADMIN,
    ROLE_USER,
    DispatchTicket,
    PushMessage,
    TicketStatus,
    User,
)
from fellowship.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from fellowship.infrastructure.push import ExpoPushClient  # noqa: E402
from fellowship.infrastructure.repositories import UserRepository  # noqa: E402
from fellowship.infrastructure.security import (  # noqa: E402
    create_access_token,
    get_password_hash,
)

DEFAULT_PASSWORD = "StrongPass123"
_DEFAULT_PASSWORD_HASH = get_password_hash(DEFAULT_PASSWORD)


class FakePushClient:
    """Record every batch instead of calling the provider."""

    max_batch_size = 100

    def __init__(
        self,
        *,
        failing_batches: Sequence[int] = (),
        rejected_tokens: Sequence[str] = (),
    ) -> None:
        self.batches: list[list[PushMessage]] = []
        self._failing_batches = set(failing_batches)
        self._rejected_tokens = set(rejected_tokens)

    def is_valid_token(self, token: str) -> bool:
        return ExpoPushClient.is_valid_token(token)

    def send(self, messages: Sequence[PushMessage]) -> list[DispatchTicket]:
        self.batches.append(list(messages))
        if len(self.batches) - 1 in self._failing_batches:
            raise ConnectionError("provider unreachable")
        tickets = []
        for index, message in enumerate(messages):
            if message.to in self._rejected_tokens:
                tickets.append(
                    DispatchTicket(
                        token=message.to,
                        status=TicketStatus.ERROR,
                        message=f"{message.to} is not a registered push notification recipient",
                        error_detail={"error": "DeviceNotRegistered"},
                    )
                )
            else:
                tickets.append(
                    DispatchTicket(
                        token=message.to, status=TicketStatus.OK, ticket_id=f"ticket-{index}"
                    )
                )
        return tickets

    @property
    def sent_tokens(self) -> list[str]:
        return [message.to for batch in self.batches for message in batch]


def expo_token(suffix: object) -> str:
    return f"ExponentPushToken[{suffix}]"


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session():
    with SessionLocal() as db:
        yield db


@pytest.fixture
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture
def make_user(session):
    """Return a factory inserting active users with a known password."""

    counter = {"value": 0}

    def _make_user(
        *,
        name: str | None = None,
        email: str | None = None,
        role: str = ROLE_USER,
        is_active: bool = True,
    ) -> User:
        counter["value"] += 1
        number = counter["value"]
        return UserRepository(session).create(
            User(
                id=None,
                name=name or f"Member {number}",
                email=email or f"member{number}@example.com",
                password=_DEFAULT_PASSWORD_HASH,
                role=role,
                is_active=is_active,
            )
        )

    return _make_user


@pytest.fixture
def make_admin(make_user):
    def _make_admin(**kwargs) -> User:
        kwargs.setdefault("name", "Church Admin")
        kwargs.setdefault("email", "admin@example.com")
        return make_user(role=ROLE_ADMIN, **kwargs)

    return _make_admin


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token({"sub": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="auth_headers")
def auth_headers_fixture():
    return auth_headers


@pytest.fixture(name="expo_token")
def expo_token_fixture():
    return expo_token


@pytest.fixture
def push_client_factory():
    return FakePushClient


@pytest.fixture
def default_password() -> str:
    return DEFAULT_PASSWORD
