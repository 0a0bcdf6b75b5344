"""
church_api.db.repositories.notifications

Repository for `Notification` entities.

Responsibilities:
- Store admin-to-user notifications.
- List a principal's notifications (as recipient or sender), newest first.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.db.models import Notification
from church_api.db.repositories.paging import Page, fetch_page


class NotificationRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, **fields: Any) -> Notification:
        notification = Notification(**fields)
        self._session.add(notification)
        await self._session.flush()
        return notification

    async def get(self, notification_id: uuid.UUID) -> Notification | None:
        return await self._session.get(Notification, notification_id)

    async def list_for_principal(
        self, principal_id: uuid.UUID, *, page: int, limit: int
    ) -> Page[Notification]:
        stmt = (
            select(Notification)
            .where(
                or_(
                    Notification.recipient_id == principal_id,
                    Notification.sender_id == principal_id,
                )
            )
            .order_by(desc(Notification.created_at), Notification.id)
        )
        return await fetch_page(self._session, stmt, page=page, limit=limit)

    async def delete(self, notification: Notification) -> None:
        await self._session.delete(notification)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Listing is always scoped to the caller; there is no "all notifications" query.
