"""
Bird Sightings Backend - Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that needs a store gets its own SQLite file under
       tmp_path, so tests never see each other's rows.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine: Async engine on a fresh SQLite file, schema created
    ├── db_session: AsyncSession bound to db_engine
    ├── mock_db_session: Mock session for tests that never reach SQL
    ├── test_client: HTTPX AsyncClient wired to the app and db_engine
    └── api_client: BirdApiClient driving the app through TestClient
"""

import asyncio
import os
import tempfile

# Override settings for testing BEFORE any birdapi imports
os.environ["DATABASE_URL"] = (
    f"sqlite+aiosqlite:///{tempfile.mkdtemp(prefix='birdapi_test_')}/test.db"
)
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SEED_EXAMPLE_DATA"] = "false"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from birdapi.client.bird_api_client import BirdApiClient
from birdapi.database import enable_sqlite_foreign_keys, get_db_session, init_db
from birdapi.main import app


def _make_engine(tmp_path):
    # NullPool: TestClient may run each request on a different event loop
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/birds.db", poolclass=NullPool)
    enable_sqlite_foreign_keys(engine)
    return engine


def _session_override(factory):
    """Same commit/rollback contract as birdapi.database.get_db_session."""

    async def override():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = _make_engine(tmp_path)
    await init_db(bind=engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A mock async session for services tested against mocked stores.

    Usage:
        async def test_get_bird(mock_db_session):
            service = BirdService(birds=mock_birds)
            await service.get_bird(mock_db_session, 1)
    """
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    The lifespan does not run, so nothing is seeded.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    app.dependency_overrides[get_db_session] = _session_override(factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(tmp_path):
    """BirdApiClient whose httpx.Client is FastAPI's TestClient (no network)."""
    engine = _make_engine(tmp_path)
    asyncio.run(init_db(bind=engine))
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    app.dependency_overrides[get_db_session] = _session_override(factory)
    client = BirdApiClient(
        base_url="http://testserver/api/v1",
        retry_attempts=1,
        http_client=TestClient(app),
    )
    yield client
    client.close()
    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())
