# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from typing import Any

import pytest

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("SEO_SERVICE_URL", None)

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from claimcheck.core.security import create_access_token  # noqa: E402
from claimcheck.db.session import Base  # noqa: E402
from claimcheck.db.session import get_db as app_get_session  # noqa: E402
from claimcheck.main import app as fastapi_app  # noqa: E402
from claimcheck.models import (  # noqa: E402
    Category,
    Claim,
    ContentStatus,
    Evidence,
    EvidenceType,
    Perspective,
    Position,
    User,
    UserRole,
)
from claimcheck.services.notifications import get_notification_dispatcher  # noqa: E402

TEST_DB_URL = "sqlite://"


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
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    # Services commit, so each test cleans the tables instead of rolling back.
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
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


@pytest.fixture(autouse=True)
def reset_notification_handlers() -> Iterator[None]:
    dispatcher = get_notification_dispatcher()
    dispatcher.clear()
    try:
        yield
    finally:
        dispatcher.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_user(db: Session, username: str, role: UserRole = UserRole.USER) -> User:
    user = User(username=username, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted regular user."""
    return _make_user(db_session, "alice")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second regular user."""
    return _make_user(db_session, "bob")


@pytest.fixture()
def moderator(db_session: Session) -> User:
    """Create and return a user with moderator capability."""
    return _make_user(db_session, "mod", UserRole.MODERATOR)


@pytest.fixture()
def admin(db_session: Session) -> User:
    return _make_user(db_session, "root", UserRole.ADMIN)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}


@pytest.fixture()
def moderator_token(moderator: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(moderator.id)}"}


@pytest.fixture()
def admin_token(admin: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(admin.id)}"}


@pytest.fixture()
def category(db_session: Session) -> Category:
    category = Category(name="Science", slug="science")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture()
def make_claim(db_session: Session, test_user: User) -> Callable[..., Claim]:
    """Factory for claims owned by the primary test user."""

    def _make(
        title: str = "The Great Wall is visible from space",
        status: ContentStatus = ContentStatus.APPROVED,
        **fields: Any,
    ) -> Claim:
        claim = Claim(user_id=test_user.id, title=title, status=status, **fields)
        db_session.add(claim)
        db_session.commit()
        db_session.refresh(claim)
        return claim

    return _make


@pytest.fixture()
def pending_claim(make_claim: Callable[..., Claim]) -> Claim:
    return make_claim(
        title="Drinking coffee stunts growth",
        description="Heard this from my grandmother",
        status=ContentStatus.PENDING,
    )


@pytest.fixture()
def approved_claim(make_claim: Callable[..., Claim]) -> Claim:
    return make_claim()


@pytest.fixture()
def make_evidence(db_session: Session, test_user: User) -> Callable[..., Evidence]:
    """Factory for evidence rows with preset vote counters."""

    def _make(
        claim: Claim,
        position: Position = Position.FOR,
        upvotes: int = 0,
        downvotes: int = 0,
        status: ContentStatus = ContentStatus.APPROVED,
    ) -> Evidence:
        evidence = Evidence(
            claim_id=claim.id,
            user_id=test_user.id,
            evidence_type=EvidenceType.TEXT,
            position=position,
            title="Source",
            description="Supporting material",
            status=status,
            upvotes=upvotes,
            downvotes=downvotes,
            score=upvotes - downvotes,
        )
        db_session.add(evidence)
        db_session.commit()
        db_session.refresh(evidence)
        return evidence

    return _make


@pytest.fixture()
def make_perspective(db_session: Session, test_user: User) -> Callable[..., Perspective]:
    """Factory for perspective rows with preset vote counters."""

    def _make(
        claim: Claim,
        position: Position = Position.FOR,
        upvotes: int = 0,
        downvotes: int = 0,
        status: ContentStatus = ContentStatus.APPROVED,
    ) -> Perspective:
        perspective = Perspective(
            claim_id=claim.id,
            user_id=test_user.id,
            position=position,
            body="I have thought about this at length.",
            status=status,
            upvotes=upvotes,
            downvotes=downvotes,
            score=upvotes - downvotes,
        )
        db_session.add(perspective)
        db_session.commit()
        db_session.refresh(perspective)
        return perspective

    return _make
