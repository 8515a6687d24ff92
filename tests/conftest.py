"""Pytest configuration and fixtures."""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="eventreel-storage-"))
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from datetime import datetime, timedelta  # noqa: E402
from typing import Any  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import eventreel.models  # noqa: E402, F401
from eventreel.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from eventreel.dependencies import get_email_client, get_storage  # noqa: E402
from eventreel.models.common import utcnow  # noqa: E402
from eventreel.repositories import (  # noqa: E402
    EventRepository,
    InviteeRepository,
    PasswordResetRepository,
    UploadRepository,
    UserRepository,
)
from eventreel.services.event import EventService  # noqa: E402
from eventreel.services.jwt import get_jwt_service  # noqa: E402
from eventreel.services.password_reset import PasswordResetService  # noqa: E402
from eventreel.services.storage import LocalObjectStorage  # noqa: E402
from eventreel.services.user import UserService  # noqa: E402


class FakeClock:
    """Controllable replacement for utcnow."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or utcnow().replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class RecordingEmailClient:
    """Email client that records messages and answers with a fixed status."""

    def __init__(self, status_code: int = 201) -> None:
        self.status_code = status_code
        self.sent: list[dict[str, Any]] = []

    def send_template_email(self, to_email: str, template_id: int, params: dict[str, Any]) -> httpx.Response:
        self.sent.append({"to": to_email, "template_id": template_id, "params": params})
        return httpx.Response(self.status_code, json={"messageId": "test"})

    def close(self) -> None:
        pass


class FailingStorage(LocalObjectStorage):
    """Storage that refuses every write."""

    def put_object(self, bucket, key, body, content_type) -> int:
        return 503


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="clock")
def clock_fixture() -> FakeClock:
    return FakeClock()


@pytest.fixture(name="storage")
def storage_fixture(tmp_path) -> LocalObjectStorage:
    return LocalObjectStorage(tmp_path / "storage", "http://storage.test")


@pytest.fixture(name="email_client")
def email_client_fixture() -> RecordingEmailClient:
    return RecordingEmailClient()


@pytest.fixture(name="user_service")
def user_service_fixture(db_session: Session) -> UserService:
    return UserService(UserRepository(db_session), get_jwt_service(), bcrypt_rounds=4)


@pytest.fixture(name="reset_service")
def reset_service_fixture(db_session: Session, email_client: RecordingEmailClient, clock: FakeClock):
    return PasswordResetService(
        UserRepository(db_session),
        PasswordResetRepository(db_session),
        email_client,
        bcrypt_rounds=4,
        clock=clock,
    )


def build_event_service(db_session: Session, storage, clock) -> EventService:
    return EventService(
        EventRepository(db_session),
        InviteeRepository(db_session),
        UploadRepository(db_session),
        storage,
        invitees_bucket="invitees",
        compiled_bucket="compiled",
        clock=clock,
    )


@pytest.fixture(name="event_service")
def event_service_fixture(db_session: Session, storage: LocalObjectStorage, clock: FakeClock) -> EventService:
    return build_event_service(db_session, storage, clock)


@pytest.fixture(name="client")
def client_fixture(db_session: Session, storage: LocalObjectStorage, email_client: RecordingEmailClient):
    """Create a test client with overridden dependencies and disabled rate limiting."""
    from eventreel.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_email_client] = lambda: email_client
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(user_service: UserService):
    """Create a test user and return its data and token."""
    user_id = user_service.add_new_user("Alex", "Alex@Example.com", "password123").unwrap()
    token = user_service.generate_jwt(user_id, "alex", "alex@example.com")
    return {
        "user_id": user_id,
        "username": "alex",
        "email": "alex@example.com",
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }
