"""
church_api.api.routers.notifications

Notification endpoints.

Responsibilities:
- Admin-only send to a user.
- Caller-scoped paged listing (as recipient or sender, newest first).
- Mark-as-read and delete for an admin, the recipient, or the sender.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from church_api.api.deps import db_session
from church_api.api.pagination import PageParams, page_envelope, page_params
from church_api.api.schemas import ApiModel, MessageResponse, to_wire
from church_api.auth.deps import get_caller, require_admin
from church_api.auth.models import CallerContext
from church_api.db.models import NotificationType
from church_api.services.notifications import NotificationService

router = APIRouter(prefix="/api", tags=["notifications"])


class NotificationCreateRequest(ApiModel):
    title: str = Field(min_length=1, max_length=256)
    message: str = Field(min_length=1)
    recipient_id: uuid.UUID
    type: NotificationType = NotificationType.general


class NotificationOut(ApiModel):
    id: uuid.UUID
    title: str
    message: str
    recipient_id: uuid.UUID
    sender_id: uuid.UUID
    read: bool
    type: NotificationType
    created_at: datetime


class NotificationEnvelope(MessageResponse):
    notification: NotificationOut


def notification_service(session: AsyncSession = Depends(db_session)) -> NotificationService:
    return NotificationService(session=session)


@router.post("/notifications", response_model=NotificationEnvelope, status_code=HTTP_201_CREATED)
async def send_notification(
    body: NotificationCreateRequest,
    caller: CallerContext = Depends(require_admin),
    svc: NotificationService = Depends(notification_service),
) -> NotificationEnvelope:
    notification = await svc.send(caller, **body.model_dump())
    return NotificationEnvelope(
        message="Notification sent successfully",
        notification=NotificationOut.model_validate(notification),
    )


@router.get("/notifications/getAll")
async def list_notifications(
    params: PageParams = Depends(page_params),
    caller: CallerContext = Depends(get_caller),
    svc: NotificationService = Depends(notification_service),
) -> dict[str, Any]:
    page = await svc.list_for(caller, page=params.page, limit=params.limit)
    return page_envelope(page, "notifications", lambda n: to_wire(NotificationOut, n))


@router.post("/notifications/{notification_id}/markasRead", response_model=NotificationEnvelope)
async def mark_notification_read(
    notification_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller),
    svc: NotificationService = Depends(notification_service),
) -> NotificationEnvelope:
    notification = await svc.mark_read(caller, notification_id)
    return NotificationEnvelope(
        message="Notification marked as read",
        notification=NotificationOut.model_validate(notification),
    )


@router.delete("/notifications/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller),
    svc: NotificationService = Depends(notification_service),
) -> MessageResponse:
    await svc.delete(caller, notification_id)
    return MessageResponse(message="Notification deleted successfully")
