"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use a DatabaseSessionManager over the test engine,
      so store faults are translated exactly as in production
    - db_manager patched for code that reads it directly (readiness probe)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Identities seeded through the repository and authenticated with tokens from
      app.state.session_tokens, so route tests don't depend on the register endpoint
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from app.api.session_cookie import SESSION_COOKIE_NAME
from app.core.password_hashing import hash_password
from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.user_repository import SqlUserRepository
import app.infrastructure.database as db_module
from app.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def test_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def client(test_manager):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    db_module.db_manager = test_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def cipher():
    return app.state.envelope_cipher


@pytest.fixture
def make_user(test_db):
    """Insert a user directly; returns the ORM row."""
    async def _make(
        email: str = "ana@example.com", name: str = "Ana", password: str = "secret1",
    ):
        return await SqlUserRepository(test_db).create(
            name=name, email=email, password_hash=hash_password(password, rounds=4),
        )
    return _make


@pytest.fixture
def session_headers():
    """Build a Cookie header carrying a fresh session token for a user id."""
    def _headers(user_id) -> dict:
        token = app.state.session_tokens.issue(user_id)
        return {"Cookie": f"{SESSION_COOKIE_NAME}={token}"}
    return _headers


@pytest.fixture
async def alice(make_user):
    return await make_user("alice@example.com", "Alice")


@pytest.fixture
async def bob(make_user):
    return await make_user("bob@example.com", "Bob")
