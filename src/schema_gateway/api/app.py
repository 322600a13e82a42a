"""FastAPI application factory for the schema gateway."""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from schema_gateway.api.errors import register_exception_handlers
from schema_gateway.api.health import StartupState
from schema_gateway.api.routes import router
from schema_gateway.config.settings import GatewaySettings
from schema_gateway.dal.catalog import PostgresCatalog
from schema_gateway.dal.database import Database
from schema_gateway.dal.query_executor import ReadOnlyQueryExecutor

logger = logging.getLogger(__name__)


async def probe_database(database: Database, startup: StartupState) -> None:
    """Run ``SELECT NOW()`` once, record the outcome and mark startup complete.

    Never raises, apart from cancellation at shutdown.
    """
    try:
        now = await database.check_connection()
    except Exception as e:
        logger.error("Database connection error: %s", e)
        startup.record_failure("database", e)
    else:
        logger.info("Database connected successfully at: %s", now)
        startup.record_success("database", detail=str(now))
    startup.complete()


def create_app(
    settings: Optional[GatewaySettings] = None, database: Optional[Database] = None
) -> FastAPI:
    """Build the gateway app around a single database handle.

    When ``database`` is omitted one is constructed from ``settings``. The pool
    is opened in the lifespan and probed by a background task, so the server
    accepts requests while the probe is still running or after it failed.
    """
    if settings is None:
        settings = GatewaySettings.from_env()
    if database is None:
        database = Database(settings.database, trace_queries=settings.trace_queries)

    startup = StartupState()

    @asynccontextmanager
    async def lifespan(app):
        """Open the pool and start the probe; stop the probe and close the pool on shutdown."""
        startup.start()
        await database.init()
        probe_task = asyncio.create_task(probe_database(database, startup))
        app.state.probe_task = probe_task
        yield
        if not probe_task.done():
            probe_task.cancel()
        with suppress(asyncio.CancelledError):
            await probe_task
        await database.close()

    app = FastAPI(title="Schema Gateway", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.catalog = PostgresCatalog(database)
    app.state.executor = ReadOnlyQueryExecutor(database)
    app.state.startup = startup

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)
    return app
