# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Must be set before huddle.core.settings is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")
os.environ.setdefault("COMPANY_EMAIL_DOMAIN", "company.com")
os.environ.pop("INVITE_CODE", None)

from huddle.core.settings import Settings, settings
from huddle.db.session import Base
from huddle.db.session import get_db as app_get_session
from huddle.main import app as fastapi_app
from huddle.models import Message, User
from huddle.services.credentials import CredentialStore
from huddle.services.sessions import SessionManager
from huddle.services.workspace import Workspace

TEST_DB_URL = "sqlite://"
DEFAULT_PASSWORD = "password123"
START_TIME = datetime(2026, 1, 5, 9, 0, tzinfo=UTC)


class FakeClock:
    """Deterministic, manually advanced UTC clock."""

    def __init__(self, start: datetime = START_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide the Settings instance the application was configured with."""
    return settings


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def workspace(db_session: Session, test_settings: Settings, clock: FakeClock) -> Workspace:
    """Core facade running on the fake clock."""
    return Workspace(db_session, test_settings, clock)


@pytest.fixture()
def make_user(db_session: Session, test_settings: Settings) -> Callable[..., User]:
    """Factory persisting a user with optional profile fields."""

    def _make_user(
        email: str,
        name: str,
        password: str = DEFAULT_PASSWORD,
        **profile: Any,
    ) -> User:
        user = CredentialStore(db_session, test_settings).create(email, password, name)
        for key, value in profile.items():
            setattr(user, key, value)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def alice(make_user: Callable[..., User]) -> User:
    return make_user(
        "alice@company.com",
        "Alice Johnson",
        department="Engineering",
        title="Senior Software Engineer",
        skills="React,Node.js,TypeScript,GraphQL",
    )


@pytest.fixture()
def bob(make_user: Callable[..., User]) -> User:
    return make_user(
        "bob@company.com",
        "Bob Martinez",
        department="Design",
        title="UX Designer",
        skills="Figma,User Research,Prototyping",
    )


@pytest.fixture()
def carol(make_user: Callable[..., User]) -> User:
    return make_user(
        "carol@company.com",
        "Carol Chen",
        department="Engineering",
        title="Engineering Manager",
        skills="Leadership,Agile,Python,System Design",
    )


@pytest.fixture()
def issue_token(db_session: Session) -> Callable[..., str]:
    """Issue a real-clock session for a user and return the raw token."""

    def _issue(user: User) -> str:
        issued = SessionManager(db_session).issue(user.id)
        db_session.commit()
        return issued.token.reveal()

    return _issue


@pytest.fixture()
def auth_token(alice: User, issue_token: Callable[..., str]) -> dict[str, str]:
    """Return authorization headers for alice."""
    return {"Authorization": f"Bearer {issue_token(alice)}"}


@pytest.fixture()
def other_auth_token(bob: User, issue_token: Callable[..., str]) -> dict[str, str]:
    """Return authorization headers for bob."""
    return {"Authorization": f"Bearer {issue_token(bob)}"}


@pytest.fixture()
def add_message(db_session: Session) -> Callable[..., Message]:
    """Insert a message directly with an explicit timestamp."""

    def _add(sender: User, receiver: User, body: str, created_at: datetime) -> Message:
        message = Message(
            sender_id=sender.id,
            receiver_id=receiver.id,
            body=body,
            created_at=created_at,
        )
        db_session.add(message)
        db_session.commit()
        db_session.refresh(message)
        return message

    return _add
