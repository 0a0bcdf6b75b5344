"""
church_api.services.financial

Financial records service (admin-only at the route layer).

Responsibilities:
- Record income/expense lines against a branch (referenced by name).
- Produce the paginated report with optional branch and date-range filters.
- Serve the simple lookups (by branch, by date range, by type).
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from church_api.auth.models import CallerContext
from church_api.db.models import Branch, Financial, naive_utc
from church_api.db.repositories.branches import BranchRepo
from church_api.db.repositories.financial import FinancialRepo
from church_api.db.repositories.paging import Page
from church_api.errors import NotFound, ValidationFailed
from church_api.observability.logging import get_logger
from church_api.services.events import check_range

log = get_logger(__name__)


class FinancialService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._records = FinancialRepo(session)
        self._branches = BranchRepo(session)

    async def _branch_by_name(self, branch_name: str) -> Branch:
        branch = await self._branches.get_by_name(branch_name)
        if branch is None:
            log.warning("branch_not_found", branch_name=branch_name)
            raise NotFound("Branch")
        return branch

    async def add(
        self,
        caller: CallerContext,
        *,
        date: datetime,
        branch_name: str,
        amount: float,
        type: str,
        description: str | None,
    ) -> tuple[Financial, Branch]:
        # Branch lookup and insert are independent statements; a branch deleted in
        # between surfaces as a store error, not a silent orphan.
        branch = await self._branch_by_name(branch_name)
        record = await self._records.create(
            date=naive_utc(date),
            branch_id=branch.id,
            amount=amount,
            type=type,
            description=description,
            recorded_by=caller.subject_id,
        )
        await self._session.commit()
        log.info("financial_record_added", record_id=str(record.id), branch_id=str(branch.id))
        return record, branch

    async def report(
        self,
        *,
        page: int,
        limit: int,
        branch_id: uuid.UUID | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> Page[Financial]:
        if (start is None) != (end is None):
            raise ValidationFailed("startDate and endDate must be provided together")
        if start is not None and end is not None:
            start, end = check_range(start, end)
        return await self._records.report(
            page=page, limit=limit, branch_id=branch_id, start=start, end=end
        )

    async def get(self, record_id: uuid.UUID) -> Financial:
        record = await self._records.get(record_id)
        if record is None:
            log.warning("financial_record_not_found", record_id=str(record_id))
            raise NotFound("Financial record")
        return record

    async def update(
        self, record_id: uuid.UUID, *, amount: float, description: str
    ) -> Financial:
        record = await self.get(record_id)
        record.amount = amount
        record.description = description
        await self._session.commit()
        log.info("financial_record_updated", record_id=str(record_id))
        return record

    async def delete(self, record_id: uuid.UUID) -> Financial:
        record = await self.get(record_id)
        await self._records.delete(record)
        await self._session.commit()
        log.info("financial_record_deleted", record_id=str(record_id))
        return record

    async def for_branch_name(self, branch_name: str) -> list[Financial]:
        branch = await self._branch_by_name(branch_name)
        return await self._records.for_branch(branch.id)

    async def in_date_range(self, start: datetime, end: datetime) -> list[Financial]:
        start, end = check_range(start, end)
        return await self._records.in_date_range(start, end)

    async def of_type(self, type_: str) -> list[Financial]:
        return await self._records.of_type(type_)
