"""
church_api.api.app

FastAPI app factory for the Church API.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Fail fast when no token signing secret is configured.
- Initialize and dispose shared infrastructure (DB engine/session factory, blob store).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from church_api import __version__
from church_api.api.error_handlers import register_error_handlers
from church_api.api.routers.admins import router as admins_router
from church_api.api.routers.attendance import router as attendance_router
from church_api.api.routers.branches import router as branches_router
from church_api.api.routers.events import router as events_router
from church_api.api.routers.financial import router as financial_router
from church_api.api.routers.health import router as health_router
from church_api.api.routers.notifications import router as notifications_router
from church_api.api.routers.session import router as session_router
from church_api.api.routers.users import router as users_router
from church_api.auth.jwt import config_from_settings
from church_api.db.init_db import init_db
from church_api.db.session import create_engine, create_sessionmaker, wait_for_database
from church_api.observability.logging import configure_logging, get_logger
from church_api.observability.middleware import RequestContextMiddleware
from church_api.settings import Settings
from church_api.storage.blob import BlobStore, build_blob_store

log = get_logger(__name__)


def create_app(*, settings: Settings, blob_store: BlobStore | None = None) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    # Raises MissingSigningKey: a process without a secret never serves requests.
    jwt_config = config_from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, identity_strategy=settings.identity_strategy)
        engine = create_engine(settings)
        await wait_for_database(
            engine,
            attempts=settings.db_connect_attempts,
            backoff_seconds=settings.db_connect_backoff_seconds,
        )
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod schema is managed by Alembic migrations.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Church API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.jwt_config = jwt_config
    app.state.blob_store = blob_store if blob_store is not None else build_blob_store(settings)

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(session_router)
    app.include_router(admins_router)
    app.include_router(users_router)
    app.include_router(branches_router)
    app.include_router(events_router)
    app.include_router(attendance_router)
    app.include_router(financial_router)
    app.include_router(notifications_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; authorization lives in `auth`, business rules in `services`.
