# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")

from ephemera.core.security import create_access_token
from ephemera.db.session import Base
from ephemera.db.session import get_db as app_get_session
from ephemera.main import app as fastapi_app
from ephemera.models import ClosedGroup, GroupAdmin, LocalUser, Thread

TEST_DB_URL = "sqlite://"

LOCAL_ADDRESS = "05" + "a1" * 32
OTHER_ADDRESS = "05" + "b2" * 32
GROUP_ADDRESS = "03" + "c3" * 32


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
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def local_user(db_session: Session) -> LocalUser:
    """Create and return the user the API authenticates as."""
    user = LocalUser(address=LOCAL_ADDRESS, display_name="Local User")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def auth_token(local_user: LocalUser) -> dict[str, str]:
    """Return authorization headers for the local user."""
    token = create_access_token(local_user.address)
    return {"Authorization": f"Bearer {token}"}


def _thread(db: Session, recipient: str | None, is_closed_group: bool = False) -> Thread:
    thread = Thread(recipient_address=recipient, is_closed_group=is_closed_group)
    db.add(thread)
    db.commit()
    db.refresh(thread)
    return thread


def _group(db: Session, admins: list[str]) -> ClosedGroup:
    group = ClosedGroup(address=GROUP_ADDRESS, title="Test Group")
    group.admins = [GroupAdmin(group_address=GROUP_ADDRESS, admin_address=a) for a in admins]
    db.add(group)
    db.commit()
    return group


@pytest.fixture()
def direct_thread(db_session: Session) -> Thread:
    """One-to-one thread with another user."""
    return _thread(db_session, OTHER_ADDRESS)


@pytest.fixture()
def note_to_self_thread(db_session: Session) -> Thread:
    """Thread addressed to the local user."""
    return _thread(db_session, LOCAL_ADDRESS)


@pytest.fixture()
def admin_group_thread(db_session: Session) -> Thread:
    """Closed group thread where the local user is an admin."""
    _group(db_session, [LOCAL_ADDRESS])
    return _thread(db_session, GROUP_ADDRESS, is_closed_group=True)


@pytest.fixture()
def member_group_thread(db_session: Session) -> Thread:
    """Closed group thread where the local user is only a member."""
    _group(db_session, [OTHER_ADDRESS])
    return _thread(db_session, GROUP_ADDRESS, is_closed_group=True)


@pytest.fixture()
def orphan_thread(db_session: Session) -> Thread:
    """Thread whose recipient could not be resolved."""
    return _thread(db_session, None)
