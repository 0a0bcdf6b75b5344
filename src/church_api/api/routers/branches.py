"""
church_api.api.routers.branches

Branch endpoints.

Responsibilities:
- Authenticated reads (paged list, lookup by id).
- Admin-only create/update/delete; branch names are unique.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from church_api.api.deps import db_session
from church_api.api.pagination import PageParams, page_envelope, page_params
from church_api.api.schemas import ApiModel, MessageResponse, to_wire
from church_api.auth.deps import get_caller, require_admin
from church_api.auth.models import CallerContext
from church_api.services.branches import BranchService

router = APIRouter(prefix="/api/branches", tags=["branches"])


class BranchUpdateRequest(ApiModel):
    branch_name: str = Field(min_length=1, max_length=256)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    country: str = Field(min_length=1)
    state: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    lead_pastor: str | None = None
    contact_number: str | None = None


class BranchCreateRequest(BranchUpdateRequest):
    state: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)


class BranchOut(ApiModel):
    id: uuid.UUID
    branch_name: str
    address: str
    city: str
    state: str | None
    country: str
    lead_pastor: str | None
    contact_number: str | None
    email: str | None
    phone: str | None
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime


class BranchEnvelope(MessageResponse):
    branch: BranchOut


def branch_service(session: AsyncSession = Depends(db_session)) -> BranchService:
    return BranchService(session=session)


@router.get("/getAll", dependencies=[Depends(get_caller)])
async def list_branches(
    params: PageParams = Depends(page_params),
    svc: BranchService = Depends(branch_service),
) -> dict[str, Any]:
    page = await svc.list(page=params.page, limit=params.limit)
    return page_envelope(page, "branches", lambda b: to_wire(BranchOut, b))


@router.get("/{branch_id}", response_model=BranchOut, dependencies=[Depends(get_caller)])
async def get_branch(
    branch_id: uuid.UUID,
    svc: BranchService = Depends(branch_service),
) -> BranchOut:
    return BranchOut.model_validate(await svc.get(branch_id))


@router.post("/", response_model=BranchEnvelope, status_code=HTTP_201_CREATED)
async def create_branch(
    body: BranchCreateRequest,
    caller: CallerContext = Depends(require_admin),
    svc: BranchService = Depends(branch_service),
) -> BranchEnvelope:
    branch = await svc.create(caller, body.model_dump(exclude_unset=True))
    return BranchEnvelope(
        message="Branch added successfully", branch=BranchOut.model_validate(branch)
    )


@router.put("/{branch_id}", response_model=BranchEnvelope, dependencies=[Depends(require_admin)])
async def update_branch(
    branch_id: uuid.UUID,
    body: BranchUpdateRequest,
    svc: BranchService = Depends(branch_service),
) -> BranchEnvelope:
    branch = await svc.update(branch_id, body.model_dump(exclude_unset=True))
    return BranchEnvelope(
        message="Branch updated successfully", branch=BranchOut.model_validate(branch)
    )


@router.delete(
    "/{branch_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_branch(
    branch_id: uuid.UUID,
    svc: BranchService = Depends(branch_service),
) -> MessageResponse:
    await svc.delete(branch_id)
    return MessageResponse(message="Branch deleted successfully")
