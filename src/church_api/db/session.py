"""
church_api.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the async engine from settings.
- Create the async sessionmaker with safe defaults.
- Probe the store at startup with bounded, fixed-backoff retries.
"""

from __future__ import annotations

import asyncio

from sqlalchemy import event, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from church_api.observability.logging import get_logger
from church_api.settings import Settings

log = get_logger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    # pool_pre_ping helps detect stale connections in long-lived processes.
    engine = create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
    )
    if engine.url.get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    # SQLite ships with foreign key enforcement off.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False avoids surprising lazy loads after commits.
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


async def wait_for_database(
    engine: AsyncEngine,
    *,
    attempts: int,
    backoff_seconds: float,
) -> None:
    """
    Block startup until the store answers `SELECT 1`.

    This is the only retried store operation in the service; request-time
    failures are surfaced immediately.
    """

    for attempt in range(1, attempts + 1):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            log.info("db_connected", attempt=attempt)
            return
        except OperationalError as e:
            log.warning("db_connect_failed", attempt=attempt, max_attempts=attempts, error=str(e))
            if attempt >= attempts:
                log.error("db_connect_gave_up", max_attempts=attempts)
                raise
            await asyncio.sleep(backoff_seconds)


# --- Module Notes -----------------------------------------------------------
# The API layer scopes sessions per request via `api.deps.db_session`.
