"""
church_api.api.routers.session

Caller introspection.

Responsibilities:
- `GET /api/whoami`: echo the resolved caller context (id, role, kind).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from church_api.api.schemas import WhoAmIResponse
from church_api.auth.deps import get_caller
from church_api.auth.models import CallerContext

router = APIRouter(prefix="/api", tags=["session"])


@router.get("/whoami", response_model=WhoAmIResponse)
async def whoami(caller: CallerContext = Depends(get_caller)) -> WhoAmIResponse:
    return WhoAmIResponse(id=caller.subject_id, role=caller.role, kind=caller.kind)
