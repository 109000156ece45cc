# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")

from threadline.db.session import Base, StoreConnection
from threadline.db.session import get_db as app_get_session
from threadline.main import app as fastapi_app
from threadline.models import Community, User
from threadline.repositories import CommunityRepository
from threadline.services import thread_service
from threadline.services.revalidation import RecordingInvalidator, get_invalidator

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)
_COMMUNITY_COUNTER = count(1)


@pytest.fixture()
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
def store(engine: Engine) -> StoreConnection:
    return StoreConnection.from_engine(engine)


@pytest.fixture()
def db_session(store: StoreConnection) -> Iterator[Session]:
    with store.session() as session:
        yield session


@pytest.fixture()
def invalidator() -> RecordingInvalidator:
    return RecordingInvalidator()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    invalidator: RecordingInvalidator,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_invalidator] = lambda: invalidator
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_invalidator, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def user_factory(db_session: Session) -> Callable[..., User]:
    """Return a helper that persists onboarded users."""

    def _create(
        external_id: str | None = None,
        username: str | None = None,
        name: str | None = None,
    ) -> User:
        n = next(_USER_COUNTER)
        user = User(
            external_id=external_id or f"user_{n}",
            username=username or f"member{n}",
            name=name or f"Member {n}",
            onboarded=True,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _create


@pytest.fixture()
def test_user(user_factory: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return user_factory("u1", "alice", "Alice")


@pytest.fixture()
def other_user(user_factory: Callable[..., User]) -> User:
    """Create and return a second persisted user."""
    return user_factory("u2", "bob", "Bob")


@pytest.fixture()
def community(db_session: Session, test_user: User) -> Community:
    """Create a default test community founded by the primary user."""
    n = next(_COMMUNITY_COUNTER)
    repo = CommunityRepository(db_session)
    created = repo.create(
        external_id=f"org_{n}",
        name="Test Community",
        username=f"testers{n}",
        image=None,
        bio="Test community description",
        created_by_id=test_user.id,
    )
    repo.add_member(created.id, test_user.id)
    db_session.commit()
    return created


@pytest.fixture()
def post_thread(
    db_session: Session,
    invalidator: RecordingInvalidator,
) -> Callable[..., int]:
    """Return a helper creating a top-level thread and returning its id."""

    def _create(author: User, text: str = "Test thread", community_id: str | None = None) -> int:
        return thread_service.create_thread(
            db_session,
            text=text,
            author_id=author.id,
            community_id=community_id,
            path="/",
            invalidator=invalidator,
        )

    return _create


@pytest.fixture()
def reply(
    db_session: Session,
    invalidator: RecordingInvalidator,
) -> Callable[..., int]:
    """Return a helper adding a reply and returning its id."""

    def _create(parent_id: int, author: User, text: str = "Reply") -> int:
        return thread_service.add_comment_to_thread(
            db_session,
            thread_id=parent_id,
            text=text,
            user_id=author.id,
            path=f"/thread/{parent_id}",
            invalidator=invalidator,
        )

    return _create
