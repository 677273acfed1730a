"""
Pytest configuration and fixtures.
"""

import os
import tempfile

# Settings are read at import time, so the test environment goes first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="salesboard-uploads-"))

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from salesboard.auth.jwt import COOKIE_NAME, create_access_token
from salesboard.db import get_db
from salesboard.main import app
from salesboard.models import Admin, Base
from salesboard.services.metrics_engine import MetricsEngine
from salesboard.store import InMemoryParticipantStore, SqlParticipantStore
from salesboard.utils.password import hash_password


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "test-password"


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    # StaticPool keeps every session on the same in-memory database
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create test database session."""
    async with session_factory() as session:
        yield session


# ── Stores and engines ──────────────────────────────────────


@pytest.fixture
def memory_store():
    return InMemoryParticipantStore()


@pytest.fixture
def metrics(memory_store):
    """Metrics engine over the in-memory store."""
    return MetricsEngine(memory_store)


@pytest.fixture
def sql_store(db_session):
    return SqlParticipantStore(db_session)


@pytest.fixture
def sql_metrics(sql_store):
    """Metrics engine over the SQLite-backed store."""
    return MetricsEngine(sql_store)


# ── HTTP ────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def admin(session_factory):
    async with session_factory() as session:
        account = Admin(
            username=ADMIN_USERNAME,
            password_hash=hash_password(ADMIN_PASSWORD),
            is_active=True,
        )
        session.add(account)
        await session.commit()
        return account


@pytest_asyncio.fixture
async def client(session_factory, admin):
    """Anonymous client against the app, backed by the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client, admin):
    """Client carrying a valid admin token cookie."""
    client.cookies.set(COOKIE_NAME, create_access_token(admin.id))
    return client
