"""
church_api.services.attendance

Attendance service.

Responsibilities:
- Record a head count for a branch; the branch and every listed attendee must exist.
- Serve the paginated report and the date-range report (admin routes).
- Look up records by branch name; an empty result is a 404.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from church_api.auth.models import CallerContext
from church_api.db.models import Attendance, naive_utc
from church_api.db.repositories.attendance import AttendanceRepo
from church_api.db.repositories.branches import BranchRepo
from church_api.db.repositories.paging import Page
from church_api.db.repositories.principals import UserRepo
from church_api.errors import NotFound, ValidationFailed
from church_api.observability.logging import get_logger
from church_api.services.events import check_range

log = get_logger(__name__)


class AttendanceService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._attendance = AttendanceRepo(session)
        self._branches = BranchRepo(session)
        self._users = UserRepo(session)

    async def record(
        self,
        caller: CallerContext,
        *,
        date: datetime,
        branch_id: uuid.UUID,
        attendees: list[uuid.UUID],
        male_count: int,
        female_count: int,
        children_count: int,
    ) -> Attendance:
        if await self._branches.get(branch_id) is None:
            log.warning("branch_not_found", branch_id=str(branch_id))
            raise NotFound("Branch")

        known = await self._users.existing_ids(attendees)
        invalid = [str(a) for a in attendees if a not in known]
        if invalid:
            log.warning("invalid_attendees", attendees=invalid)
            raise ValidationFailed(f"Invalid attendee IDs: {', '.join(invalid)}")

        record = await self._attendance.create(
            date=naive_utc(date),
            branch_id=branch_id,
            attendees=[str(a) for a in attendees],
            male_count=male_count,
            female_count=female_count,
            children_count=children_count,
            recorded_by=caller.subject_id,
        )
        await self._session.commit()
        log.info("attendance_recorded", attendance_id=str(record.id), branch_id=str(branch_id))
        return record

    async def report(self, *, page: int, limit: int) -> Page[Attendance]:
        return await self._attendance.list_page(page=page, limit=limit)

    async def range_report(
        self, *, start: datetime, end: datetime, page: int, limit: int
    ) -> Page[Attendance]:
        start, end = check_range(start, end)
        return await self._attendance.list_page(page=page, limit=limit, start=start, end=end)

    async def for_branch_name(self, branch_name: str) -> list[Attendance]:
        branch = await self._branches.get_by_name(branch_name)
        if branch is None:
            log.warning("branch_not_found", branch_name=branch_name)
            raise NotFound("Branch")
        records = await self._attendance.for_branch(branch.id)
        if not records:
            raise NotFound("Attendance", "No attendance records found for this branch")
        return records
