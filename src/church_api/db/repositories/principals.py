"""
church_api.db.repositories.principals

Repositories for `Admin` and `User` principals.

Responsibilities:
- Lookups by id and by (normalized) email.
- Inserts that surface unique-index violations as `IntegrityError` for the caller.
- Paginated listing for the admin consoles.
"""

from __future__ import annotations

import uuid
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.db.models import Admin, User
from church_api.db.repositories.paging import Page, fetch_page

P = TypeVar("P", Admin, User)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class PrincipalRepo(Generic[P]):
    model: type[P]

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, principal_id: uuid.UUID) -> P | None:
        return await self._session.get(self.model, principal_id)

    async def get_by_email(self, email: str) -> P | None:
        stmt = select(self.model).where(self.model.email == normalize_email(email))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def email_taken(self, email: str, *, exclude_id: uuid.UUID | None = None) -> bool:
        # Advisory only; the unique index decides under concurrency.
        stmt = select(self.model.id).where(self.model.email == normalize_email(email))
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        return (await self._session.execute(stmt.limit(1))).first() is not None

    async def create(self, **fields: Any) -> P:
        fields["email"] = normalize_email(fields["email"])
        principal = self.model(**fields)
        self._session.add(principal)
        # Flush so a unique violation is raised here, inside the caller's error handling.
        await self._session.flush()
        return principal

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        return int((await self._session.execute(stmt)).scalar_one())

    async def list_page(self, *, page: int, limit: int) -> Page[P]:
        stmt = select(self.model).order_by(self.model.created_at, self.model.id)
        return await fetch_page(self._session, stmt, page=page, limit=limit)

    async def delete(self, principal: P) -> None:
        await self._session.delete(principal)
        await self._session.flush()


class AdminRepo(PrincipalRepo[Admin]):
    model = Admin


class UserRepo(PrincipalRepo[User]):
    model = User

    async def existing_ids(self, ids: list[uuid.UUID]) -> set[uuid.UUID]:
        if not ids:
            return set()
        stmt = select(User.id).where(User.id.in_(ids))
        return set((await self._session.execute(stmt)).scalars().all())


# --- Module Notes -----------------------------------------------------------
# Admins and users live in separate tables; token `kind` claims pick the repo to use.
