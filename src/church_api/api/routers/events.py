"""
church_api.api.routers.events

Event endpoints.

Responsibilities:
- Public reads: paged/sorted list, lookup, date range, location, branch, organizer.
- Authenticated create and owner/admin update/delete via multipart form data
  (optional `image` part, JPEG/PNG).
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from church_api.api.deps import blob_store_dep, db_session, settings_dep
from church_api.api.pagination import PageParams, page_envelope, page_params
from church_api.api.schemas import ApiModel, MessageResponse, to_wire
from church_api.auth.deps import get_caller
from church_api.auth.models import CallerContext
from church_api.db.repositories.events import EventSortField
from church_api.services.events import EventService, UploadedImage, parse_attendee_ids
from church_api.settings import Settings
from church_api.storage.blob import BlobStore

router = APIRouter(prefix="/api", tags=["events"])


class EventOut(ApiModel):
    id: uuid.UUID
    title: str
    description: str | None
    date: datetime
    location: uuid.UUID
    branch_name: str | None
    organizer: uuid.UUID
    attendees: list[str]
    image_url: str | None
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime


class EventEnvelope(MessageResponse):
    event: EventOut


def event_service(
    session: AsyncSession = Depends(db_session),
    blob_store: BlobStore = Depends(blob_store_dep),
    settings: Settings = Depends(settings_dep),
) -> EventService:
    return EventService(
        session=session, blob_store=blob_store, max_image_bytes=settings.max_image_bytes
    )


async def read_image_part(image: UploadFile | None, max_bytes: int) -> UploadedImage | None:
    # Browsers send an empty part when no file was chosen.
    if image is None or not image.filename:
        return None
    # One byte past the cap is enough for the size check to reject the part.
    return UploadedImage(
        filename=image.filename,
        content=await image.read(max_bytes + 1),
        content_type=image.content_type or "",
    )


@router.get("/events/getAll")
async def list_events(
    params: PageParams = Depends(page_params),
    sort: EventSortField = Query(default="date"),
    order: Literal["asc", "desc"] = Query(default="asc"),
    svc: EventService = Depends(event_service),
) -> dict[str, Any]:
    page = await svc.list(page=params.page, limit=params.limit, sort=sort, order=order)
    return page_envelope(page, "events", lambda e: to_wire(EventOut, e))


@router.get("/events/date-range", response_model=list[EventOut])
async def events_in_range(
    start: datetime = Query(alias="startDate"),
    end: datetime = Query(alias="endDate"),
    svc: EventService = Depends(event_service),
) -> list[EventOut]:
    return [EventOut.model_validate(e) for e in await svc.in_date_range(start, end)]


@router.get("/events/location", response_model=list[EventOut])
async def events_at_location(
    location: str = Query(min_length=1),
    svc: EventService = Depends(event_service),
) -> list[EventOut]:
    return [EventOut.model_validate(e) for e in await svc.at_location(location)]


@router.get("/events/branch", response_model=list[EventOut])
async def events_for_branch(
    branch_name: str = Query(alias="branchName", min_length=1),
    svc: EventService = Depends(event_service),
) -> list[EventOut]:
    return [EventOut.model_validate(e) for e in await svc.for_branch_name(branch_name)]


@router.get("/events/organizer", response_model=list[EventOut])
async def events_by_organizer(
    organizer: uuid.UUID = Query(),
    svc: EventService = Depends(event_service),
) -> list[EventOut]:
    return [EventOut.model_validate(e) for e in await svc.by_organizer(organizer)]


@router.get("/event/{event_id}", response_model=EventOut)
async def get_event(
    event_id: uuid.UUID,
    svc: EventService = Depends(event_service),
) -> EventOut:
    return EventOut.model_validate(await svc.get(event_id))


@router.post("/events", response_model=EventEnvelope, status_code=HTTP_201_CREATED)
async def create_event(
    title: str = Form(min_length=1),
    date: datetime = Form(),
    location: str = Form(min_length=1),
    organizer: uuid.UUID = Form(),
    description: str | None = Form(default=None),
    attendees: str | None = Form(default=None),
    branch_name: str | None = Form(default=None, alias="branchName"),
    image: UploadFile | None = File(default=None),
    caller: CallerContext = Depends(get_caller),
    svc: EventService = Depends(event_service),
) -> EventEnvelope:
    event = await svc.create(
        caller,
        title=title,
        description=description,
        date=date,
        location=location,
        organizer=organizer,
        attendees=parse_attendee_ids(attendees),
        branch_name=branch_name,
        image=await read_image_part(image, svc.max_image_bytes),
    )
    return EventEnvelope(message="Event created successfully", event=EventOut.model_validate(event))


@router.put("/events/{event_id}", response_model=EventEnvelope)
async def update_event(
    event_id: uuid.UUID,
    title: str = Form(min_length=1),
    description: str = Form(),
    date: datetime = Form(),
    location: str = Form(min_length=1),
    image: UploadFile | None = File(default=None),
    caller: CallerContext = Depends(get_caller),
    svc: EventService = Depends(event_service),
) -> EventEnvelope:
    event = await svc.update(
        caller,
        event_id,
        title=title,
        description=description,
        date=date,
        location=location,
        image=await read_image_part(image, svc.max_image_bytes),
    )
    return EventEnvelope(message="Event updated successfully", event=EventOut.model_validate(event))


@router.delete("/event/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller),
    svc: EventService = Depends(event_service),
) -> MessageResponse:
    await svc.delete(caller, event_id)
    return MessageResponse(message="Event deleted successfully")
