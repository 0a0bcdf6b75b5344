"""
church_api.api.routers.attendance

Attendance endpoints.

Responsibilities:
- Authenticated recording of a service's attendance for a branch.
- Admin-only paged reports (all records, or within a date range).
- Authenticated lookup by branch name.
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
from church_api.auth.deps import get_caller, require_admin
from church_api.auth.models import CallerContext
from church_api.services.attendance import AttendanceService

router = APIRouter(prefix="/api", tags=["attendance"])


class AttendanceCreateRequest(ApiModel):
    date: datetime
    branch_id: uuid.UUID
    attendees: list[uuid.UUID] = Field(default_factory=list)
    male_count: int = Field(default=0, ge=0)
    female_count: int = Field(default=0, ge=0)
    children_count: int = Field(default=0, ge=0)


class AttendanceOut(ApiModel):
    id: uuid.UUID
    date: datetime
    branch_id: uuid.UUID
    attendees: list[str]
    male_count: int
    female_count: int
    children_count: int
    recorded_by: uuid.UUID
    created_at: datetime


class AttendanceEnvelope(MessageResponse):
    attendance: AttendanceOut


def attendance_service(session: AsyncSession = Depends(db_session)) -> AttendanceService:
    return AttendanceService(session=session)


@router.post("/attendance", response_model=AttendanceEnvelope, status_code=HTTP_201_CREATED)
async def record_attendance(
    body: AttendanceCreateRequest,
    caller: CallerContext = Depends(get_caller),
    svc: AttendanceService = Depends(attendance_service),
) -> AttendanceEnvelope:
    record = await svc.record(caller, **body.model_dump())
    return AttendanceEnvelope(
        message="Attendance recorded successfully",
        attendance=AttendanceOut.model_validate(record),
    )


@router.get("/attendance/reports", dependencies=[Depends(require_admin)])
async def attendance_report(
    params: PageParams = Depends(page_params),
    svc: AttendanceService = Depends(attendance_service),
) -> dict[str, Any]:
    page = await svc.report(page=params.page, limit=params.limit)
    return page_envelope(page, "attendance", lambda a: to_wire(AttendanceOut, a))


@router.get("/attendance/range", dependencies=[Depends(require_admin)])
async def attendance_in_range(
    start: datetime = Query(alias="startDate"),
    end: datetime = Query(alias="endDate"),
    params: PageParams = Depends(page_params),
    svc: AttendanceService = Depends(attendance_service),
) -> dict[str, Any]:
    page = await svc.range_report(start=start, end=end, page=params.page, limit=params.limit)
    return page_envelope(page, "attendance", lambda a: to_wire(AttendanceOut, a))


@router.get(
    "/attendance/branch",
    response_model=list[AttendanceOut],
    dependencies=[Depends(get_caller)],
)
async def attendance_for_branch(
    branch_name: str = Query(alias="branchName", min_length=1),
    svc: AttendanceService = Depends(attendance_service),
) -> list[AttendanceOut]:
    return [AttendanceOut.model_validate(a) for a in await svc.for_branch_name(branch_name)]
