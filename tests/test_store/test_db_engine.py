"""
Database Engine Tests.
"""

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from launchsense.db.engine import close_db, get_engine, get_session_factory, init_db
from launchsense.store.sql import SqlDataStore


class TestInitDb:
    @pytest.mark.asyncio
    async def test_creates_tables(self):
        engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
        try:
            await init_db(engine)
            async with engine.connect() as conn:
                tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
            assert {"ls_decision_rules", "ls_signal_weights", "ls_decision_ledger"} <= set(tables)
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_idempotent(self):
        engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
        try:
            await init_db(engine)
            await init_db(engine)
        finally:
            await engine.dispose()


class TestEngineLifecycle:
    @pytest.mark.asyncio
    async def test_singletons_reset_on_close(self):
        engine = get_engine()
        assert get_engine() is engine
        assert SqlDataStore().session_factory is get_session_factory()

        await close_db()
        assert get_engine() is not engine
        await close_db()
