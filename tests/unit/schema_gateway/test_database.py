from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from schema_gateway.config.settings import DatabaseSettings
from schema_gateway.dal.database import Database


def _mock_pool(conn):
    acquire_ctx = MagicMock()
    acquire_ctx.__aenter__ = AsyncMock(return_value=conn)
    acquire_ctx.__aexit__ = AsyncMock(return_value=False)
    pool = MagicMock()
    pool.acquire = MagicMock(return_value=acquire_ctx)
    pool.close = AsyncMock()
    return pool


class TestDatabase:
    """Tests for the pool handle lifecycle."""

    @pytest.mark.asyncio
    async def test_init_creates_lazy_pool(self):
        settings = DatabaseSettings(password="pw", pool_max_size=3)
        pool = _mock_pool(AsyncMock())

        with patch(
            "schema_gateway.dal.database.asyncpg.create_pool", AsyncMock(return_value=pool)
        ) as create_pool:
            db = Database(settings)
            await db.init()
            await db.init()

        create_pool.assert_awaited_once()
        args, kwargs = create_pool.call_args
        assert args == (settings.dsn,)
        assert kwargs["min_size"] == 0
        assert kwargs["max_size"] == 3
        assert db.is_initialized

    @pytest.mark.asyncio
    async def test_init_failure_is_logged_not_raised(self, caplog):
        with patch(
            "schema_gateway.dal.database.asyncpg.create_pool",
            AsyncMock(side_effect=OSError("connection refused")),
        ):
            db = Database(DatabaseSettings())
            await db.init()

        assert not db.is_initialized
        assert "Failed to create database pool" in caplog.text

    @pytest.mark.asyncio
    async def test_get_connection_without_pool_raises(self):
        db = Database(DatabaseSettings())

        with pytest.raises(ConnectionError, match="not initialized"):
            async with db.get_connection():
                pass

    @pytest.mark.asyncio
    async def test_check_connection_runs_probe(self):
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        conn = AsyncMock()
        conn.fetchval = AsyncMock(return_value=now)
        pool = _mock_pool(conn)

        with patch(
            "schema_gateway.dal.database.asyncpg.create_pool", AsyncMock(return_value=pool)
        ):
            db = Database(DatabaseSettings())
            await db.init()
            assert await db.check_connection() == now

        conn.fetchval.assert_awaited_once_with("SELECT NOW()")
        pool.acquire.assert_called_once()

    @pytest.mark.asyncio
    async def test_close_releases_pool(self):
        pool = _mock_pool(AsyncMock())

        with patch(
            "schema_gateway.dal.database.asyncpg.create_pool", AsyncMock(return_value=pool)
        ):
            db = Database(DatabaseSettings())
            await db.init()
            await db.close()
            await db.close()

        pool.close.assert_awaited_once()
        assert not db.is_initialized
