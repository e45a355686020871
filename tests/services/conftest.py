"""Service test fixtures — async DB, FastAPI test client, accounts and a scripted LLM.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB
    - db_manager patched so the readiness probe sees the test DB
    - get_llm_client overridden: no test reaches the real Anthropic API

Design Decisions:
    - SQLite in-memory over StaticPool: one shared connection, so the test
      session and request sessions see the same data
    - Accounts are created through the signup endpoint, so every route test
      also exercises hashing and token issuance
"""

import datetime as dt

import pytest
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from tutor_network.api.dependencies import get_llm_client
from tutor_network.db.base import Base
from tutor_network.infrastructure.database import get_db, DatabaseSessionManager
import tutor_network.infrastructure.database as db_module
import tutor_network.models  # noqa: F401
from tutor_network.main import app

from tests.services.accounts import signup
from tests.services.mock_anthropic import MockLLMClient


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
def llm():
    """Scripted LLM: tests append responses to llm.responses before calling."""
    return MockLLMClient([])


@pytest.fixture
async def client(test_engine, test_session_factory, llm):
    """FastAPI test client with DB and LLM dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_client] = lambda: llm

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def no_llm(client):
    """Simulate a server without an Anthropic API key (requires client)."""
    app.dependency_overrides[get_llm_client] = lambda: None


# -- Accounts ------------------------------------------------------------------

@pytest.fixture
async def tutor(client):
    return await signup(client, "ada@tutors.io", "tutor", "Ada Lovelace")


@pytest.fixture
async def student(client):
    return await signup(client, "sam@learners.io", "student", "Sam Student")


@pytest.fixture
async def other_student(client):
    return await signup(client, "kim@learners.io", "student", "Kim Other")


@pytest.fixture
def future_date():
    """A date safely in the future regardless of when the suite runs."""
    return (dt.datetime.now(dt.timezone.utc).date() + dt.timedelta(days=7))


@pytest.fixture
async def published(client, tutor, future_date):
    """Tutor availability with three slots one week out."""
    resp = await client.post(
        "/api/v1/availabilities",
        json={
            "date": future_date.isoformat(),
            "time_slots": ["10:00 AM", "2:00 PM", "9:00 AM"],
        },
        headers=tutor["headers"],
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
