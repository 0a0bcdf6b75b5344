"""
church_api.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the blob store.
- Encapsulate app.state access patterns (engine/sessionmaker/blob store).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from church_api.settings import Settings
from church_api.storage.blob import BlobStore


def settings_dep(request: Request) -> Settings:
    # The app is built from an explicit Settings instance; tests rely on this.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created in the lifespan handler of `church_api.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def blob_store_dep(request: Request) -> BlobStore:
    return request.app.state.blob_store  # type: ignore[attr-defined]
