import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import asyncpg

from schema_gateway.config.settings import DatabaseSettings

logger = logging.getLogger(__name__)


class Database:
    """Owns the asyncpg connection pool shared by all request handlers.

    One instance is built by the application factory and handed to the
    catalog and executor, so tests can swap in a double without touching
    module state.
    """

    def __init__(self, settings: DatabaseSettings, trace_queries: bool = False):
        """Store settings; the pool is created later by ``init``."""
        self.settings = settings
        self.trace_queries = trace_queries
        self._pool: Optional[asyncpg.Pool] = None

    @property
    def is_initialized(self) -> bool:
        """Return True once a pool exists."""
        return self._pool is not None

    async def init(self) -> None:
        """Create the pool.

        With the default ``min_size=0`` asyncpg opens no connection here, so an
        unreachable server does not stop the HTTP server from starting. Any
        failure is logged and left for the first request to surface.
        """
        if self._pool is not None:
            return
        try:
            self._pool = await asyncpg.create_pool(
                self.settings.dsn,
                min_size=self.settings.pool_min_size,
                max_size=self.settings.pool_max_size,
                server_settings={"application_name": "schema_gateway"},
            )
            logger.info(
                "Database pool created for %s@%s:%s/%s",
                self.settings.user,
                self.settings.host,
                self.settings.port,
                self.settings.name,
            )
        except Exception as e:
            logger.error("Failed to create database pool: %s", e)

    async def close(self) -> None:
        """Close the pool if it was created."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    @asynccontextmanager
    async def get_connection(self):
        """Acquire a pooled connection for the duration of the block."""
        if self._pool is None:
            raise ConnectionError("Database pool is not initialized")
        async with self._pool.acquire() as conn:
            yield conn

    async def check_connection(self) -> datetime:
        """Run the liveness probe and return the server's current time."""
        async with self.get_connection() as conn:
            return await conn.fetchval("SELECT NOW()")
