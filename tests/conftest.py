"""
Test configuration and fixtures.

Provides:
- In-memory SQLite session (schema created and dropped per test)
- Users and bearer tokens for authenticated tests
- HTTPX AsyncClient against the ASGI app
"""
import os
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Callable, Generator

# Settings are read at import time; configure before importing the app
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["JWT_SECRET"] = "test-secret-key-with-at-least-32-bytes"
os.environ["JWT_SECRET_PREVIOUS"] = ""
os.environ["GHL_API_TOKEN"] = ""
os.environ["GHL_LOCATION_ID"] = ""
os.environ["GHL_USER_NAME_OVERRIDES"] = ""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

from app.main import app
from app.db.base import Base
from app.db.session import engine, SessionLocal
from app.core.deps import get_db
from app.core.security import create_access_token, hash_password
from app.db.models import User
from app.db.enums import Role, UserStatus

TEST_PASSWORD = "correct-horse-battery"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    App code commits freely; dropping the tables afterwards isolates tests.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def make_user(db: Session) -> Callable[..., User]:
    """Factory for users with a known password."""
    def _make_user(
        role: Role = Role.SURVEYOR,
        name: str | None = "Test User",
        ghl_user_id: str | None = None,
        ghl_team_id: str | None = None,
        status: UserStatus = UserStatus.ACTIVE,
        username: str | None = None,
    ) -> User:
        suffix = uuid.uuid4().hex[:8]
        user = User(
            username=username or f"user-{suffix}",
            email=f"test-{suffix}@test.com",
            name=name,
            password_hash=hash_password(TEST_PASSWORD),
            role=role.value,
            status=status.value,
            ghl_user_id=ghl_user_id,
            ghl_team_id=ghl_team_id,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture(scope="function")
def test_user(make_user) -> User:
    """A surveyor not yet linked to GoHighLevel."""
    return make_user(role=Role.SURVEYOR, name="Rob Koch")


@pytest.fixture(scope="function")
def admin_user(make_user) -> User:
    return make_user(role=Role.ADMIN, name="Office Admin")


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def auth_for(user: User) -> TestAuth:
    token = create_access_token(
        user_id=user.id,
        role=user.role,
        token_version=user.token_version,
    )
    return TestAuth(user=user, token=token)


@pytest.fixture(scope="function")
def make_auth() -> Callable[[User], TestAuth]:
    """Factory for bearer tokens of arbitrary users."""
    return auth_for


@pytest.fixture(scope="function")
def test_auth(test_user: User) -> TestAuth:
    """Bearer token for test_user."""
    return auth_for(test_user)


@pytest.fixture(scope="function")
def admin_auth(admin_user: User) -> TestAuth:
    return auth_for(admin_user)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Create unauthenticated AsyncClient for testing public endpoints.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(
    db: Session,
    test_auth: TestAuth
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create AsyncClient authenticated as test_user.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=test_auth.headers,
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def admin_client(
    db: Session,
    admin_auth: TestAuth
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create AsyncClient authenticated as an ADMIN.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=admin_auth.headers,
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def password() -> str:
    """Plaintext password of every user made by make_user."""
    return TEST_PASSWORD
