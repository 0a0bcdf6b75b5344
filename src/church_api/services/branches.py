"""
church_api.services.branches

Branch service.

Responsibilities:
- List and fetch branches for any authenticated caller.
- Create, rename and delete branches (admin routes), keeping branch names unique.
- Carry a rename through to the branch name copied onto its events.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.auth.models import CallerContext
from church_api.db.models import Branch
from church_api.db.repositories.branches import BranchRepo
from church_api.db.repositories.events import EventRepo
from church_api.db.repositories.paging import Page
from church_api.errors import Conflict, NotFound
from church_api.observability.logging import get_logger

log = get_logger(__name__)

DUPLICATE_BRANCH = "Branch with this name already exists"


class BranchService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._branches = BranchRepo(session)
        self._events = EventRepo(session)

    async def list(self, *, page: int, limit: int) -> Page[Branch]:
        return await self._branches.list_page(page=page, limit=limit)

    async def get(self, branch_id: uuid.UUID) -> Branch:
        branch = await self._branches.get(branch_id)
        if branch is None:
            log.warning("branch_not_found", branch_id=str(branch_id))
            raise NotFound("Branch")
        return branch

    async def create(self, caller: CallerContext, fields: dict[str, Any]) -> Branch:
        if await self._branches.name_taken(fields["branch_name"]):
            raise Conflict(DUPLICATE_BRANCH)
        try:
            branch = await self._branches.create(created_by=caller.subject_id, **fields)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise Conflict(DUPLICATE_BRANCH) from e
        log.info("branch_created", branch_id=str(branch.id), by=str(caller.subject_id))
        return branch

    async def update(self, branch_id: uuid.UUID, fields: dict[str, Any]) -> Branch:
        branch = await self.get(branch_id)
        new_name = fields.get("branch_name")
        if new_name is not None and await self._branches.name_taken(new_name, exclude_id=branch_id):
            raise Conflict(DUPLICATE_BRANCH)
        old_name = branch.branch_name
        for field, value in fields.items():
            setattr(branch, field, value)
        try:
            if new_name is not None and new_name != old_name:
                await self._events.rename_branch(branch_id, old_name, new_name)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise Conflict(DUPLICATE_BRANCH) from e
        log.info("branch_updated", branch_id=str(branch_id))
        return branch

    async def delete(self, branch_id: uuid.UUID) -> None:
        branch = await self.get(branch_id)
        try:
            await self._branches.delete(branch)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise Conflict("Branch is still referenced by events or records") from e
        log.info("branch_deleted", branch_id=str(branch_id))
