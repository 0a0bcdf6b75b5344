"""
church_api.db.repositories.events

Repository for `Event` entities.

Responsibilities:
- CRUD for events.
- Sorted/paginated listing and the lookup filters (date range, location, branch, organizer).
- Keep the copied branch name in step when a branch is renamed.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Literal

from sqlalchemy import asc, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.db.models import Event
from church_api.db.repositories.paging import Page, fetch_page

EventSortField = Literal["date", "title", "location"]

_SORT_COLUMNS = {
    "date": Event.date,
    "title": Event.title,
    "location": Event.location,
}


class EventRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, **fields: Any) -> Event:
        event = Event(**fields)
        self._session.add(event)
        await self._session.flush()
        return event

    async def get(self, event_id: uuid.UUID) -> Event | None:
        return await self._session.get(Event, event_id)

    async def list_page(
        self,
        *,
        page: int,
        limit: int,
        sort: EventSortField = "date",
        order: Literal["asc", "desc"] = "asc",
    ) -> Page[Event]:
        direction = desc if order == "desc" else asc
        stmt = select(Event).order_by(direction(_SORT_COLUMNS[sort]), Event.id)
        return await fetch_page(self._session, stmt, page=page, limit=limit)

    async def in_date_range(self, start: datetime, end: datetime) -> list[Event]:
        stmt = (
            select(Event)
            .where(Event.date >= start, Event.date <= end)
            .order_by(asc(Event.date))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def at_location(self, branch_id: uuid.UUID) -> list[Event]:
        stmt = select(Event).where(Event.location == branch_id).order_by(asc(Event.date))
        return list((await self._session.execute(stmt)).scalars().all())

    async def for_branch_name(self, branch_name: str) -> list[Event]:
        stmt = select(Event).where(Event.branch_name == branch_name).order_by(asc(Event.date))
        return list((await self._session.execute(stmt)).scalars().all())

    async def rename_branch(self, branch_id: uuid.UUID, old_name: str, new_name: str) -> None:
        # Only rows still carrying the old copied name; a custom label is left alone.
        stmt = (
            update(Event)
            .where(Event.location == branch_id, Event.branch_name == old_name)
            .values(branch_name=new_name)
        )
        await self._session.execute(stmt)

    async def by_organizer(self, organizer_id: uuid.UUID) -> list[Event]:
        stmt = select(Event).where(Event.organizer == organizer_id).order_by(asc(Event.date))
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete(self, event: Event) -> None:
        await self._session.delete(event)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Unpaginated lookups mirror the public "find by ..." endpoints; they are bounded by
# the size of a single church's calendar.
