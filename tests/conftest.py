"""
Flotify - Test Configuration

Pytest fixtures: in-memory database, controllable clock, auth manager,
test client and seeded users.
"""

from datetime import datetime, timedelta, timezone
from typing import Generator
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from flotify.app import create_app
from flotify.auth.manager import AuthManager
from flotify.auth.password import hash_password
from flotify.auth.tokens import AuthConfig
from flotify.config import Settings
from flotify.database import get_session_factory
from flotify.models import User


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_SECRET_KEY = "flotify-test-secret-key"

FIXED_USER_ID = UUID("11111111-1111-1111-1111-111111111111")


class FakeClock:
    """Callable UTC clock that tests move forward explicitly."""
    
    def __init__(self):
        self.current = datetime.now(timezone.utc)
    
    def __call__(self) -> datetime:
        return self.current
    
    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        SECRET_KEY=TEST_SECRET_KEY,
        DATABASE_URL=TEST_DATABASE_URL,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture(scope="function")
def test_engine():
    """Create a fresh test database engine for each test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    
    # Import models to register them
    from flotify import models  # noqa: F401
    
    SQLModel.metadata.create_all(engine)
    
    yield engine
    
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a database session for seeding data."""
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(secret_key=TEST_SECRET_KEY)


@pytest.fixture
def auth_manager(auth_config, test_engine, clock) -> AuthManager:
    return AuthManager(auth_config, get_session_factory(test_engine), clock=clock)


@pytest.fixture(scope="function")
def client(test_settings, test_engine, clock) -> Generator[TestClient, None, None]:
    """Create a test client with fresh database."""
    app = create_app(test_settings, engine=test_engine, clock=clock)
    with TestClient(app) as c:
        yield c


def _create_user(db: Session, username: str, email: str, password: str, **kwargs) -> User:
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        **kwargs,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_user(db_session) -> User:
    """User x@x.com with password 'correctpass'."""
    return _create_user(db_session, "xuser", "x@x.com", "correctpass")


@pytest.fixture(scope="function")
def other_user(db_session) -> User:
    return _create_user(db_session, "yuser", "y@y.com", "otherpass123")


@pytest.fixture(scope="function")
def fixed_id_user(db_session) -> User:
    return _create_user(
        db_session, "fixed", "fixed@x.com", "fixedpass123", id=FIXED_USER_ID
    )


def login_user(client: TestClient, email: str, password: str) -> dict:
    """Helper function to login and return tokens."""
    response = client.post(
        "/users/login",
        json={"email": email, "password": password},
    )
    return response.json() if response.status_code == 200 else None


def auth_headers(access_token: str) -> dict:
    """Create authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {access_token}"}
