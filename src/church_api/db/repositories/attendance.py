"""
church_api.db.repositories.attendance

Repository for `Attendance` records.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.db.models import Attendance
from church_api.db.repositories.paging import Page, fetch_page


class AttendanceRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, **fields: Any) -> Attendance:
        record = Attendance(**fields)
        self._session.add(record)
        await self._session.flush()
        return record

    async def list_page(
        self,
        *,
        page: int,
        limit: int,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> Page[Attendance]:
        stmt = select(Attendance)
        if start is not None:
            stmt = stmt.where(Attendance.date >= start)
        if end is not None:
            stmt = stmt.where(Attendance.date <= end)
        stmt = stmt.order_by(desc(Attendance.date), Attendance.id)
        return await fetch_page(self._session, stmt, page=page, limit=limit)

    async def for_branch(self, branch_id: uuid.UUID) -> list[Attendance]:
        stmt = (
            select(Attendance)
            .where(Attendance.branch_id == branch_id)
            .order_by(desc(Attendance.date))
        )
        return list((await self._session.execute(stmt)).scalars().all())
