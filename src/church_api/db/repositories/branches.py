"""
church_api.db.repositories.branches

Repository for `Branch` entities.

Responsibilities:
- CRUD and paginated listing.
- Name lookups and the advisory uniqueness check.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.db.models import Branch
from church_api.db.repositories.paging import Page, fetch_page


class BranchRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, created_by: uuid.UUID, **fields: Any) -> Branch:
        branch = Branch(created_by=created_by, **fields)
        self._session.add(branch)
        await self._session.flush()
        return branch

    async def get(self, branch_id: uuid.UUID) -> Branch | None:
        return await self._session.get(Branch, branch_id)

    async def get_by_name(self, branch_name: str) -> Branch | None:
        stmt = select(Branch).where(Branch.branch_name == branch_name)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def name_taken(self, branch_name: str, *, exclude_id: uuid.UUID | None = None) -> bool:
        stmt = select(Branch.id).where(Branch.branch_name == branch_name)
        if exclude_id is not None:
            stmt = stmt.where(Branch.id != exclude_id)
        return (await self._session.execute(stmt.limit(1))).first() is not None

    async def list_page(self, *, page: int, limit: int) -> Page[Branch]:
        stmt = select(Branch).order_by(Branch.created_at, Branch.id)
        return await fetch_page(self._session, stmt, page=page, limit=limit)

    async def delete(self, branch: Branch) -> None:
        await self._session.delete(branch)
        await self._session.flush()
