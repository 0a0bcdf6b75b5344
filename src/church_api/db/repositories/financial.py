"""
church_api.db.repositories.financial

Repository for `Financial` records.

Responsibilities:
- CRUD for income and expense lines.
- The filtered report (branch, date range) and the simple lookups.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.db.models import Financial
from church_api.db.repositories.paging import Page, fetch_page


class FinancialRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, **fields: Any) -> Financial:
        record = Financial(**fields)
        self._session.add(record)
        await self._session.flush()
        return record

    async def get(self, record_id: uuid.UUID) -> Financial | None:
        return await self._session.get(Financial, record_id)

    async def report(
        self,
        *,
        page: int,
        limit: int,
        branch_id: uuid.UUID | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> Page[Financial]:
        stmt = select(Financial)
        if branch_id is not None:
            stmt = stmt.where(Financial.branch_id == branch_id)
        if start is not None and end is not None:
            stmt = stmt.where(Financial.date >= start, Financial.date <= end)
        stmt = stmt.order_by(desc(Financial.date), Financial.id)
        return await fetch_page(self._session, stmt, page=page, limit=limit)

    async def for_branch(self, branch_id: uuid.UUID) -> list[Financial]:
        stmt = (
            select(Financial)
            .where(Financial.branch_id == branch_id)
            .order_by(desc(Financial.date))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def in_date_range(self, start: datetime, end: datetime) -> list[Financial]:
        stmt = (
            select(Financial)
            .where(Financial.date >= start, Financial.date <= end)
            .order_by(desc(Financial.date))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def of_type(self, type_: str) -> list[Financial]:
        stmt = select(Financial).where(Financial.type == type_).order_by(desc(Financial.date))
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete(self, record: Financial) -> None:
        await self._session.delete(record)
        await self._session.flush()
