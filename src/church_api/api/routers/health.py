"""
church_api.api.routers.health

Liveness and readiness probes.

Responsibilities:
- `/healthz` answers without touching the store.
- `/readyz` runs a trivial query and reports whether image uploads are wired.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.api.deps import blob_store_dep, db_session, settings_dep
from church_api.settings import Settings
from church_api.storage.blob import BlobStore, UnconfiguredBlobStore

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz(settings: Settings = Depends(settings_dep)) -> dict[str, str]:
    return {"status": "ok", "service": settings.service_name}


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    blob_store: BlobStore = Depends(blob_store_dep),
) -> dict[str, str]:
    await session.execute(text("SELECT 1"))
    uploads = "disabled" if isinstance(blob_store, UnconfiguredBlobStore) else "enabled"
    return {"status": "ready", "database": "ok", "imageUploads": uploads}
