"""
church_api.services.notifications

Notification service.

Responsibilities:
- Send a notification from an admin to an existing user.
- List the notifications a caller sent or received, newest first.
- Mark as read and delete, gated on admin, recipient or sender before any write.
"""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from church_api.auth import gate
from church_api.auth.models import CallerContext
from church_api.db.models import Notification, NotificationType
from church_api.db.repositories.notifications import NotificationRepo
from church_api.db.repositories.paging import Page
from church_api.db.repositories.principals import UserRepo
from church_api.errors import NotFound
from church_api.observability.logging import get_logger

log = get_logger(__name__)


class NotificationService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._notifications = NotificationRepo(session)
        self._users = UserRepo(session)

    async def send(
        self,
        caller: CallerContext,
        *,
        title: str,
        message: str,
        recipient_id: uuid.UUID,
        type: NotificationType = NotificationType.general,
    ) -> Notification:
        if await self._users.get(recipient_id) is None:
            log.warning("recipient_not_found", recipient_id=str(recipient_id))
            raise NotFound("Recipient")
        notification = await self._notifications.create(
            title=title,
            message=message,
            recipient_id=recipient_id,
            sender_id=caller.subject_id,
            type=type,
        )
        await self._session.commit()
        log.info(
            "notification_sent",
            notification_id=str(notification.id),
            recipient_id=str(recipient_id),
        )
        return notification

    async def list_for(self, caller: CallerContext, *, page: int, limit: int) -> Page[Notification]:
        return await self._notifications.list_for_principal(
            caller.subject_id, page=page, limit=limit
        )

    async def _owned(self, caller: CallerContext, notification_id: uuid.UUID) -> Notification:
        notification = await self._notifications.get(notification_id)
        if notification is None:
            log.warning("notification_not_found", notification_id=str(notification_id))
            raise NotFound("Notification")
        # Checked before any mutation; the record is untouched on denial.
        gate.require_admin_or_owner(caller, notification, "recipient_id", "sender_id")
        return notification

    async def mark_read(self, caller: CallerContext, notification_id: uuid.UUID) -> Notification:
        notification = await self._owned(caller, notification_id)
        notification.read = True
        await self._session.commit()
        log.info("notification_marked_read", notification_id=str(notification_id))
        return notification

    async def delete(self, caller: CallerContext, notification_id: uuid.UUID) -> None:
        notification = await self._owned(caller, notification_id)
        await self._notifications.delete(notification)
        await self._session.commit()
        log.info("notification_deleted", notification_id=str(notification_id))
