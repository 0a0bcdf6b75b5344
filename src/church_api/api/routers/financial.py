"""
church_api.api.routers.financial

Financial record endpoints (admin only).

Responsibilities:
- Add a record against a branch referenced by name.
- Paged report with optional branch and date-range filters.
- Update amount/description, delete, and lookups by branch, date range and type.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from church_api.api.deps import db_session
from church_api.api.pagination import PageParams, page_envelope, page_params
from church_api.api.schemas import ApiModel, MessageResponse, to_wire
from church_api.auth.deps import require_admin
from church_api.auth.models import CallerContext
from church_api.services.financial import FinancialService

router = APIRouter(prefix="/api", tags=["financial"])


class FinancialCreateRequest(ApiModel):
    date: datetime
    branch_name: str = Field(min_length=1)
    amount: float = Field(gt=0)
    type: str = Field(min_length=1, max_length=64)
    description: str | None = None


class FinancialUpdateRequest(ApiModel):
    amount: float = Field(gt=0)
    description: str


class FinancialOut(ApiModel):
    id: uuid.UUID
    date: datetime
    branch_id: uuid.UUID
    amount: float
    type: str
    description: str | None
    recorded_by: uuid.UUID
    created_at: datetime


class FinancialAddedOut(FinancialOut):
    branch_name: str


class FinancialAddedEnvelope(MessageResponse):
    record: FinancialAddedOut


class FinancialEnvelope(MessageResponse):
    record: FinancialOut


def financial_service(session: AsyncSession = Depends(db_session)) -> FinancialService:
    return FinancialService(session=session)


@router.post(
    "/financial/add",
    response_model=FinancialAddedEnvelope,
    status_code=HTTP_201_CREATED,
)
async def add_record(
    body: FinancialCreateRequest,
    caller: CallerContext = Depends(require_admin),
    svc: FinancialService = Depends(financial_service),
) -> FinancialAddedEnvelope:
    record, branch = await svc.add(caller, **body.model_dump())
    added = FinancialAddedOut(
        **FinancialOut.model_validate(record).model_dump(), branch_name=branch.branch_name
    )
    return FinancialAddedEnvelope(message="Financial record added successfully", record=added)


@router.get("/financial/getAll", dependencies=[Depends(require_admin)])
async def financial_report(
    params: PageParams = Depends(page_params),
    branch_id: uuid.UUID | None = Query(default=None, alias="branchId"),
    start: datetime | None = Query(default=None, alias="startDate"),
    end: datetime | None = Query(default=None, alias="endDate"),
    svc: FinancialService = Depends(financial_service),
) -> dict[str, Any]:
    page = await svc.report(
        page=params.page, limit=params.limit, branch_id=branch_id, start=start, end=end
    )
    return page_envelope(page, "records", lambda r: to_wire(FinancialOut, r))


@router.get(
    "/financial/branch",
    response_model=list[FinancialOut],
    dependencies=[Depends(require_admin)],
)
async def records_for_branch(
    branch_name: str = Query(alias="branchName", min_length=1),
    svc: FinancialService = Depends(financial_service),
) -> list[FinancialOut]:
    return [FinancialOut.model_validate(r) for r in await svc.for_branch_name(branch_name)]


@router.get(
    "/financial/date-range",
    response_model=list[FinancialOut],
    dependencies=[Depends(require_admin)],
)
async def records_in_range(
    start: datetime = Query(alias="startDate"),
    end: datetime = Query(alias="endDate"),
    svc: FinancialService = Depends(financial_service),
) -> list[FinancialOut]:
    return [FinancialOut.model_validate(r) for r in await svc.in_date_range(start, end)]


@router.get(
    "/financial/type",
    response_model=list[FinancialOut],
    dependencies=[Depends(require_admin)],
)
async def records_of_type(
    type_: str = Query(alias="type", min_length=1),
    svc: FinancialService = Depends(financial_service),
) -> list[FinancialOut]:
    return [FinancialOut.model_validate(r) for r in await svc.of_type(type_)]


@router.put(
    "/financial/{record_id}",
    response_model=FinancialEnvelope,
    dependencies=[Depends(require_admin)],
)
async def update_record(
    record_id: uuid.UUID,
    body: FinancialUpdateRequest,
    svc: FinancialService = Depends(financial_service),
) -> FinancialEnvelope:
    record = await svc.update(record_id, amount=body.amount, description=body.description)
    return FinancialEnvelope(
        message="Financial record updated successfully",
        record=FinancialOut.model_validate(record),
    )


@router.delete(
    "/financial/{record_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_record(
    record_id: uuid.UUID,
    svc: FinancialService = Depends(financial_service),
) -> MessageResponse:
    await svc.delete(record_id)
    return MessageResponse(message="Financial record deleted successfully")
