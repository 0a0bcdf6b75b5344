"""
church_api.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables (and their unique indexes) for local development and tests.
- Keep the production migration workflow separate (Alembic).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from church_api.db import models  # noqa: F401  # registers tables on Base.metadata
from church_api.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    Production runs `alembic upgrade head` instead.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# `create_all` builds the same unique indexes as the initial Alembic revision, so
# duplicate-email races are caught by the store in every environment.
