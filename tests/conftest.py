"""
Test infrastructure for the Podcast API.

Strategy
--------
- Service unit tests run against ``MagicMock(spec=Store)`` stores: the
  spec turns every async store primitive into an ``AsyncMock`` and keeps
  ``create`` synchronous, so call counts and arguments can be asserted
  without a database.
- Store, model and endpoint tests use SQLite in-memory via aiosqlite.
  StaticPool forces every session onto the one connection that holds the
  in-memory database, and ``PRAGMA foreign_keys=ON`` makes SQLite honour
  the ON DELETE CASCADE from episodes to podcasts.
- The app's get_db dependency is overridden so every test-time request
  uses the test session factory rather than the production one.
- All tables are created fresh before each test and dropped after.
"""
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from podcast_api.database import Base, get_db
from podcast_api.main import app
from podcast_api.middleware import install_query_counter
from podcast_api.security import JwtService
from podcast_api.stores import Store

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)


@event.listens_for(engine_test.sync_engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override — replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Yield a live AsyncSession for tests that talk to the database directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ---------------------------------------------------------------------------
# Collaborator fakes for service unit tests
# ---------------------------------------------------------------------------

@pytest.fixture
def users_store() -> MagicMock:
    return MagicMock(spec=Store)


@pytest.fixture
def podcasts_store() -> MagicMock:
    return MagicMock(spec=Store)


@pytest.fixture
def episodes_store() -> MagicMock:
    return MagicMock(spec=Store)


@pytest.fixture
def jwt_service() -> MagicMock:
    jwt = MagicMock(spec=JwtService)
    jwt.sign.return_value = "token-string"
    return jwt
