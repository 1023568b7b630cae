"""
Pytest configuration and fixtures for testing.
"""
import fnmatch
import os

# Settings are read at import time, so the test environment goes in first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ADMIN_EMAIL", "admin@eventdekho.test")
os.environ.setdefault("ADMIN_PASSWORD", "admin-pass")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_eventdekho.db")

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from eventdekho.main import app
from eventdekho.db.session import Base, get_session
from eventdekho.core.config import settings
from eventdekho.core.security import create_system_admin_token, create_user_token, hash_password
from eventdekho.db.models import Event, User
from eventdekho.db.models.enums import EventCategory, RoleEnum, OrganizationType
from eventdekho.cache.redis_client import cache


# Test database URL - use environment variable if available (e.g. a Postgres container)
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_eventdekho.db")

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,  # Disable connection pooling for tests
    echo=False,
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

PASSWORD = "secret1"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh schema and session for each test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client bound to the app, sharing the test's database session.
    """
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_user(db_session: AsyncSession, email: str, name: str, role: RoleEnum, verified: bool) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password(PASSWORD),
        role=role,
        verified=verified,
        type=OrganizationType.school if role == RoleEnum.organizer else None,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """A student account."""
    return await _make_user(db_session, "student@example.com", "Student", RoleEnum.user, False)


@pytest_asyncio.fixture
async def test_organizer(db_session: AsyncSession) -> User:
    """A verified organizer."""
    return await _make_user(db_session, "organizer@example.com", "Verified School", RoleEnum.organizer, True)


@pytest_asyncio.fixture
async def pending_organizer(db_session: AsyncSession) -> User:
    """An organizer still waiting for admin verification."""
    return await _make_user(db_session, "pending@example.com", "Pending School", RoleEnum.organizer, False)


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> User:
    """A stored admin account."""
    return await _make_user(db_session, "admin@example.com", "Stored Admin", RoleEnum.admin, True)


@pytest.fixture
def user_token(test_user: User) -> str:
    return create_user_token(test_user)


@pytest.fixture
def organizer_token(test_organizer: User) -> str:
    return create_user_token(test_organizer)


@pytest.fixture
def pending_token(pending_organizer: User) -> str:
    return create_user_token(pending_organizer)


@pytest.fixture
def admin_token(test_admin: User) -> str:
    return create_user_token(test_admin)


@pytest.fixture
def system_admin_token() -> str:
    """Token for the environment-configured admin, who has no users row."""
    return create_system_admin_token(settings.ADMIN_EMAIL)


@pytest.fixture
def make_event(db_session: AsyncSession):
    """Factory inserting events directly, bypassing the API's checks."""
    async def factory(organizer_id, approved: bool = True, **overrides) -> Event:
        fields = dict(
            title="Science Fair",
            description="Annual inter-school science fair",
            category=EventCategory.academic_tech,
            organizer_id=organizer_id,
            organizer_name="Organizer",
            organizer_email="organizer@example.com",
            location="Pune, Maharashtra",
            date="2030-01-15",
            approved=approved,
        )
        fields.update(overrides)
        event = Event(**fields)
        db_session.add(event)
        await db_session.commit()
        await db_session.refresh(event)
        return event
    return factory


@pytest_asyncio.fixture
async def test_event(make_event, test_organizer: User) -> Event:
    """An approved event from the verified organizer."""
    return await make_event(str(test_organizer.id))


class FakeRedis:
    """In-memory stand-in for the handful of redis commands the cache uses."""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    def keys(self, pattern):
        return [key for key in self.store if fnmatch.fnmatchcase(key, pattern)]

    def exists(self, key):
        return 1 if key in self.store else 0

    def close(self):
        pass


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch) -> FakeRedis:
    """Replace the redis client with an in-memory fake for every test."""
    fake = FakeRedis()
    monkeypatch.setattr(cache, "_get_client", lambda: fake)
    return fake


@pytest.fixture(autouse=True)
def mock_password_hashing(monkeypatch):
    """
    Mock bcrypt password hashing so tests don't pay for real bcrypt rounds.
    This fixture is autouse, so it applies to all tests automatically.
    """
    class MockPasswordContext:
        """Mock password context that doesn't require bcrypt."""
        def hash(self, password: str) -> str:
            return f"$2b$12$mockedhash{password}"

        def verify(self, plain: str, hashed: str) -> bool:
            return hashed == f"$2b$12$mockedhash{plain}"

    from eventdekho.core import security
    monkeypatch.setattr(security, "pwd_context", MockPasswordContext())


@pytest.fixture
def outbox(monkeypatch) -> list:
    """Configure SMTP and capture every outgoing message instead of sending it."""
    from eventdekho.services import email_service

    sent = []
    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test")
    monkeypatch.setattr(settings, "SMTP_USER", "mailer@eventdekho.test")
    monkeypatch.setattr(email_service, "_deliver", sent.append)
    return sent


@pytest.fixture
def failing_mailer(monkeypatch):
    """Configure SMTP but make every delivery fail."""
    import smtplib
    from eventdekho.services import email_service

    def refuse(message):
        raise smtplib.SMTPException("connection refused")

    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test")
    monkeypatch.setattr(email_service, "_deliver", refuse)


@pytest.fixture
def uploads(monkeypatch) -> list:
    """Configure a bucket and capture uploads instead of calling S3."""
    from eventdekho.services import storage_service

    stored = []

    def put(fileobj, key, content_type):
        stored.append({"key": key, "body": fileobj.read(), "content_type": content_type})

    monkeypatch.setattr(settings, "S3_BUCKET", "test-bucket")
    monkeypatch.setattr(settings, "MEDIA_BASE_URL", "https://media.test")
    monkeypatch.setattr(storage_service, "_put_object", put)
    return stored
