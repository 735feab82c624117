"""
Marknote Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite) with the
       full schema created from Base.metadata. HTTP tests run the real app
       through httpx's ASGITransport with get_db_session overridden to use
       that database.

Fixture Hierarchy (all function-scoped):
    db_engine ──┬── db_session ── make_user / make_note
                └── test_app ──── test_client / other_client
    mock_db_session: AsyncMock session for error-path tests
"""

import os

# Override settings for testing BEFORE any marknote imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"  # keep registration fast
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from datetime import datetime, timezone
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import marknote.models  # noqa: F401  registers tables on Base.metadata
from marknote.database import Base, get_db_session
from marknote.main import create_app
from marknote.models.note import Note
from marknote.models.user import User
from marknote.services.passwords import hash_password

DEFAULT_PASSWORD = "secret123"


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    Provides an engine bound to a private in-memory SQLite database.

    StaticPool keeps the single connection alive, so every session opened
    from this engine sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """A session for calling services directly."""
    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
        with pytest.raises(DatabaseError): ...
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_user(db_session):
    """
    Factory inserting a user row.

    Usage:
        alice = await make_user("alice@example.com")
    """

    async def _make_user(email: str, name: Optional[str] = None) -> User:
        user = User(
            name=name or email.split("@")[0].capitalize(),
            email=email,
            password_hash=hash_password(DEFAULT_PASSWORD),
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _make_user


@pytest.fixture
def make_note(db_session):
    """
    Factory inserting a note row with an explicit creation time.

    Lets ordering tests control created_at exactly instead of relying on
    clock resolution between inserts.
    """

    async def _make_note(
        owner_id: UUID,
        title: str,
        content: str = "Some content",
        tags: Optional[List[str]] = None,
        created_at: Optional[datetime] = None,
    ) -> Note:
        when = created_at or datetime.now(timezone.utc)
        note = Note(
            owner_id=owner_id,
            title=title,
            content=content,
            tags=list(tags or []),
            created_at=when,
            updated_at=when,
        )
        db_session.add(note)
        await db_session.flush()
        return note

    return _make_note


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_app(db_engine):
    """The real application wired to the test database."""
    app = create_app()
    factory = async_sessionmaker(db_engine, expire_on_commit=False)

    async def override_get_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    return app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Its cookie jar carries the session cookie between requests, like a browser.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def other_client(test_app):
    """A second, independent browser session against the same app."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register():
    """
    Registers through the API, leaving the given client logged in.

    Usage:
        user = await register(test_client, "alice@example.com")
    """

    async def _register(client: AsyncClient, email: str, name: str = "Tester") -> dict:
        response = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": DEFAULT_PASSWORD},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register
