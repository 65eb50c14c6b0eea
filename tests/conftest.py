# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "debate-stage-test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from debate_stage.api.v1.dependencies import get_notifier
from debate_stage.core.security import create_access_token
from debate_stage.db.session import Base
from debate_stage.db.session import get_db as app_get_session
from debate_stage.main import app as fastapi_app
from debate_stage.models import Claim, Evidence, Perspective, Reply, User
from debate_stage.models.enums import ContentStatus, Position, Role
from debate_stage.services.notifications import NotificationMessage

TEST_DB_URL = "sqlite://"

_USERNAME_COUNTER = count(1)


class RecordingNotifier:
    """Stand-in dispatcher that keeps enqueued messages for assertions."""

    def __init__(self) -> None:
        self.messages: list[NotificationMessage] = []

    def enqueue(self, message: NotificationMessage) -> None:
        self.messages.append(message)


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
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit, so every test starts from empty tables.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    notifier: RecordingNotifier,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_notifier, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users with unique usernames."""

    def _make_user(role: Role = Role.USER, **fields: Any) -> User:
        n = next(_USERNAME_COUNTER)
        user = User(
            username=fields.pop("username", f"user{n}"),
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", f"User{n}"),
            role=role,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user(username="alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second persisted user."""
    return make_user(username="bob")


@pytest.fixture()
def moderator(make_user: Callable[..., User]) -> User:
    return make_user(role=Role.MODERATOR, username="mod")


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    return auth_headers


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def test_claim(db_session: Session, test_user: User) -> Claim:
    claim = Claim(
        author_id=test_user.id,
        title="Cities should ban cars",
        status=ContentStatus.APPROVED,
    )
    db_session.add(claim)
    db_session.commit()
    db_session.refresh(claim)
    return claim


@pytest.fixture()
def make_evidence(
    db_session: Session,
    test_claim: Claim,
    other_user: User,
) -> Callable[..., Evidence]:
    """Return a factory for evidence on ``test_claim``."""

    def _make_evidence(
        status: ContentStatus = ContentStatus.APPROVED,
        position: Position = Position.FOR,
        **fields: Any,
    ) -> Evidence:
        evidence = Evidence(
            claim_id=fields.pop("claim_id", test_claim.id),
            author_id=fields.pop("author_id", other_user.id),
            position=position,
            title="Traffic study",
            url="https://example.org/study",
            status=status,
            **fields,
        )
        db_session.add(evidence)
        db_session.commit()
        db_session.refresh(evidence)
        return evidence

    return _make_evidence


@pytest.fixture()
def test_evidence(make_evidence: Callable[..., Evidence]) -> Evidence:
    return make_evidence()


@pytest.fixture()
def test_perspective(db_session: Session, test_claim: Claim, other_user: User) -> Perspective:
    perspective = Perspective(
        claim_id=test_claim.id,
        author_id=other_user.id,
        position=Position.AGAINST,
        body="Delivery logistics would collapse.",
        status=ContentStatus.APPROVED,
    )
    db_session.add(perspective)
    db_session.commit()
    db_session.refresh(perspective)
    return perspective


@pytest.fixture()
def test_reply(db_session: Session, test_evidence: Evidence, other_user: User) -> Reply:
    reply = Reply(
        parent_type="evidence",
        parent_id=test_evidence.id,
        author_id=other_user.id,
        body="Which city was studied?",
    )
    db_session.add(reply)
    db_session.commit()
    db_session.refresh(reply)
    return reply
