"""
Test fixtures for LaunchSense.

Provides:
- Async DB engine/session factory (SQLite in-memory for speed)
- In-memory data store
- Sample telemetry payloads
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from launchsense.db.engine import Base
from launchsense.db.models import (  # noqa: F401 - register all models
    DecisionRuleRecord,
    LedgerRecord,
    SignalWeightRecord,
)
from launchsense.logging_config import configure_logging
from launchsense.store.memory import InMemoryDataStore

configure_logging(level="WARNING", fmt="console")

# In-memory SQLite for fast, isolated tests
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    """Create a fresh test database engine with all tables."""
    eng = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a DB session per test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def memory_store() -> InMemoryDataStore:
    return InMemoryDataStore()


# ── Sample Payloads ──────────────────────────────────────────────────────


@pytest.fixture
def healthy_payload() -> dict:
    """Ten-minute session, no trouble signals."""
    return {
        "game_id": "game-001",
        "player_id": "player-001",
        "session_id": "session-001",
        "playtime": 600,
        "deaths": 0,
        "restarts": 0,
        "early_quit": False,
    }


@pytest.fixture
def risky_payload() -> dict:
    """Every model check trips: short, quit early, many deaths and restarts."""
    return {
        "game_id": "game-001",
        "player_id": "player-002",
        "session_id": "session-002",
        "playtime": 300,
        "deaths": 8,
        "restarts": 6,
        "early_quit": True,
    }
