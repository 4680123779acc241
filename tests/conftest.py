"""Shared pytest fixtures for all tests."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from life_ledger.auth import create_access_token
from life_ledger.config import Settings, get_settings
from life_ledger.db.core import Base, get_db
from life_ledger.db.json_store import JsonFileStore
from life_ledger.db.sql_store import SqlStore
from life_ledger.main import app


@pytest.fixture
def settings(tmp_path):
    """Settings pointing the JSON store at a temporary file.

    Returns:
        Settings: Test configuration; tests may flip feature switches on it.
    """
    return Settings(
        database_url="sqlite://",
        json_db_path=tmp_path / "db.json",
        auth_jwt_secret="test-secret",
    )


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database with every table.

    Yields:
        Session: Session shared by the test and the app.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def json_store(settings):
    return JsonFileStore(settings.json_db_path)


@pytest.fixture
def sql_store(db_session):
    return SqlStore(db_session)


@pytest.fixture
def client(settings, db_session):
    """TestClient wired to the temporary stores.

    The lifespan is not entered so the real database is never touched.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_headers(settings):
    """Build Authorization headers for an arbitrary user id."""
    def _make(user_id: str):
        return {"Authorization": f"Bearer {create_access_token(user_id, settings)}"}
    return _make


@pytest.fixture
def auth_headers(make_headers):
    return make_headers("user-1")
