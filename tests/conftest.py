"""
tests.conftest

Shared fixtures: a real app instance per test on a temp-file SQLite database.

Responsibilities:
- Build test settings (signing secret set, bcrypt cost lowered).
- Run the app lifespan explicitly (httpx ASGITransport does not manage it).
- Provide ready-made admin, member and branch fixtures.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.api.app import create_app
from church_api.auth.jwt import JwtConfig, config_from_settings
from church_api.settings import Settings
from helpers import FakeBlobStore, bearer, register_admin, register_user


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        log_level="WARNING",
        jwt_secret="test-signing-secret-with-enough-entropy",
        bcrypt_rounds=4,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'church.db'}",
        db_connect_attempts=1,
        db_connect_backoff_seconds=0,
    )


@pytest.fixture
def jwt_cfg(settings: Settings) -> JwtConfig:
    return config_from_settings(settings)


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest_asyncio.fixture
async def app(settings: Settings, blob_store: FakeBlobStore) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings, blob_store=blob_store)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def session(app: FastAPI) -> AsyncIterator[AsyncSession]:
    async with app.state.sessionmaker() as s:
        yield s


@pytest_asyncio.fixture
async def admin(client: httpx.AsyncClient) -> tuple[dict[str, Any], str]:
    return await register_admin(client, "admin@gracechurch.org")


@pytest_asyncio.fixture
async def member(client: httpx.AsyncClient) -> tuple[dict[str, Any], str]:
    return await register_user(client, "member@gracechurch.org")


@pytest_asyncio.fixture
async def branch(client: httpx.AsyncClient, admin) -> dict[str, Any]:
    _, token = admin
    r = await client.post(
        "/api/branches/",
        json={
            "branchName": "Downtown",
            "address": "1 Main St",
            "city": "Springfield",
            "state": "IL",
            "country": "US",
            "email": "downtown@gracechurch.org",
            "phone": "555-0100",
        },
        headers=bearer(token),
    )
    assert r.status_code == 201, r.text
    return r.json()["branch"]
