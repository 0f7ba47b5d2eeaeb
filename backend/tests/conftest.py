"""
Pytest configuration and fixtures
"""
import os
import tempfile
from unittest.mock import Mock

# Settings are read at import time; point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="backoffice-logs-")
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("WEBHOOK_CALLBACK_SECRET", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import backoffice.models  # noqa: F401
from backoffice.core.database import Base, get_db
from backoffice.core.security import get_authenticator, hash_password
from backoffice.main import app
from backoffice.models.contractor import Contractor
from backoffice.models.user import User, UserRole
from backoffice.services.render_webhook import RenderWebhookClient, get_render_client

# One in-memory database shared by every connection of the test engine
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db() -> Session:
    """Create a database session on a fresh schema."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def render_client():
    """Render webhook stand-in; dispatch succeeds unless a test says otherwise."""
    client = Mock(spec=RenderWebhookClient)
    client.dispatch.return_value = Mock(status_code=200, ok=True)
    return client


@pytest.fixture
def client(db, render_client):
    """API client bound to the test database and the mocked webhook."""

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_render_client] = lambda: render_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_user(db: Session, email: str, name: str, role: str) -> User:
    user = User(email=email, name=name, password_hash=hash_password(PASSWORD), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db) -> User:
    return _make_user(db, "admin@example.com", "Admin", UserRole.ADMIN.value)


@pytest.fixture
def regular_user(db) -> User:
    return _make_user(db, "user@example.com", "Regular User", UserRole.USER.value)


@pytest.fixture
def other_user(db) -> User:
    return _make_user(db, "other@example.com", "Other User", UserRole.USER.value)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {get_authenticator().issue_for(user)}"}


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return auth_headers(admin_user)


@pytest.fixture
def user_headers(regular_user) -> dict:
    return auth_headers(regular_user)


@pytest.fixture
def other_headers(other_user) -> dict:
    return auth_headers(other_user)


def make_contractor(db: Session, inn: str, short_name: str, **fields) -> Contractor:
    values = {
        "short_name": short_name,
        "full_name": f'ООО "{short_name}"',
        "ogrn": "1027700000000",
        "inn": inn,
        "legal_address": "г. Москва, ул. Примерная, д. 1",
    }
    values.update(fields)
    contractor = Contractor(**values)
    db.add(contractor)
    db.commit()
    db.refresh(contractor)
    return contractor


@pytest.fixture
def customer(db) -> Contractor:
    return make_contractor(db, "7701234567", "Альфа", director="Иванов Иван Иванович", kpp="770101001")


@pytest.fixture
def contractor(db) -> Contractor:
    return make_contractor(db, "7707654321", "Бета", director="Петров Пётр")


@pytest.fixture
def headers_for():
    """Build Authorization headers for any user."""
    return auth_headers


@pytest.fixture
def user_password() -> str:
    return PASSWORD


@pytest.fixture
def contractor_factory(db):
    def factory(inn: str, short_name: str, **fields) -> Contractor:
        return make_contractor(db, inn, short_name, **fields)
    return factory


@pytest.fixture
def session_factory(db):
    """Session factory bound to the test database, for code that opens its own sessions."""
    return TestingSessionLocal


@pytest.fixture
def other_session(db) -> Session:
    """A second session, standing in for a concurrent request."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
