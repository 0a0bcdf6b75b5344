"""
church_api.db.repositories.paging

Offset pagination shared by every repository.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        # ceil(total / limit) without float rounding.
        return -(-self.total // self.limit) if self.limit else 0


async def fetch_page(
    session: AsyncSession,
    stmt: Select[Any],
    *,
    page: int,
    limit: int,
) -> Page[Any]:
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = int((await session.execute(count_stmt)).scalar_one())
    rows = (await session.execute(stmt.offset((page - 1) * limit).limit(limit))).scalars().all()
    return Page(items=list(rows), total=total, page=page, limit=limit)
