"""
church_api.services.events

Event scheduling service.

Responsibilities:
- Create/update/delete events, resolving the branch and organizer they reference.
- Upload optional event images through the blob store.
- Serve the public event lookups (paged list, date range, location, branch, organizer).

Authorization:
- Any authenticated principal may create an event.
- Update/delete require an admin, the organizer, or the creator.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from sqlalchemy.ext.asyncio import AsyncSession

from church_api.auth import gate
from church_api.auth.models import CallerContext
from church_api.db.models import Branch, Event, naive_utc
from church_api.db.repositories.branches import BranchRepo
from church_api.db.repositories.events import EventRepo, EventSortField
from church_api.db.repositories.paging import Page
from church_api.db.repositories.principals import UserRepo
from church_api.errors import NotFound, ValidationFailed
from church_api.observability.logging import get_logger
from church_api.storage.blob import BlobStore, validate_image

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class UploadedImage:
    filename: str
    content: bytes
    content_type: str


def parse_attendee_ids(raw: str | None) -> list[uuid.UUID]:
    # Attendees arrive as a comma-separated form field.
    if not raw:
        return []
    ids: list[uuid.UUID] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(uuid.UUID(part))
        except ValueError as e:
            log.warning("invalid_attendee_id", attendee_id=part)
            raise ValidationFailed("One or more attendee IDs are invalid") from e
    return ids


def check_range(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    start, end = naive_utc(start), naive_utc(end)
    if start > end:
        raise ValidationFailed("Start date cannot be after end date")
    return start, end


class EventService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        blob_store: BlobStore,
        max_image_bytes: int,
    ) -> None:
        self._session = session
        self._blob_store = blob_store
        self._max_image_bytes = max_image_bytes

        self._events = EventRepo(session)
        self._branches = BranchRepo(session)
        self._users = UserRepo(session)

    @property
    def max_image_bytes(self) -> int:
        return self._max_image_bytes

    async def resolve_branch(self, location: str) -> Branch:
        # `location` may be a branch id or a branch name.
        try:
            branch = await self._branches.get(uuid.UUID(location))
        except ValueError:
            branch = await self._branches.get_by_name(location)
        if branch is None:
            log.warning("branch_not_found", location=location)
            raise NotFound("Branch")
        return branch

    async def _upload(self, image: UploadedImage | None) -> str | None:
        if image is None:
            return None
        return await self._blob_store.upload(
            filename=image.filename, content=image.content, content_type=image.content_type
        )

    def _check_image(self, image: UploadedImage | None) -> None:
        if image is not None:
            validate_image(
                content=image.content,
                content_type=image.content_type,
                max_bytes=self._max_image_bytes,
            )

    async def create(
        self,
        caller: CallerContext,
        *,
        title: str,
        description: str | None,
        date: datetime,
        location: str,
        organizer: uuid.UUID,
        attendees: list[uuid.UUID],
        branch_name: str | None = None,
        image: UploadedImage | None = None,
    ) -> Event:
        self._check_image(image)

        branch = await self.resolve_branch(location)
        if await self._users.get(organizer) is None:
            log.warning("organizer_not_found", organizer=str(organizer))
            raise NotFound("Organizer")

        image_url = await self._upload(image)
        event = await self._events.create(
            title=title,
            description=description,
            date=naive_utc(date),
            location=branch.id,
            branch_name=branch_name or branch.branch_name,
            organizer=organizer,
            attendees=[str(a) for a in attendees],
            image_url=image_url,
            created_by=caller.subject_id,
        )
        await self._session.commit()
        log.info("event_created", event_id=str(event.id), by=str(caller.subject_id))
        return event

    async def get(self, event_id: uuid.UUID) -> Event:
        event = await self._events.get(event_id)
        if event is None:
            log.warning("event_not_found", event_id=str(event_id))
            raise NotFound("Event")
        return event

    async def update(
        self,
        caller: CallerContext,
        event_id: uuid.UUID,
        *,
        title: str,
        description: str,
        date: datetime,
        location: str,
        image: UploadedImage | None = None,
    ) -> Event:
        self._check_image(image)
        event = await self.get(event_id)
        gate.require_admin_or_owner(caller, event, "organizer", "created_by")

        branch = await self.resolve_branch(location)
        image_url = await self._upload(image)

        event.title = title
        event.description = description
        event.date = naive_utc(date)
        event.location = branch.id
        event.branch_name = branch.branch_name
        if image_url is not None:
            event.image_url = image_url
        await self._session.commit()
        log.info("event_updated", event_id=str(event_id), by=str(caller.subject_id))
        return event

    async def delete(self, caller: CallerContext, event_id: uuid.UUID) -> None:
        event = await self.get(event_id)
        gate.require_admin_or_owner(caller, event, "organizer", "created_by")
        await self._events.delete(event)
        await self._session.commit()
        log.info("event_deleted", event_id=str(event_id), by=str(caller.subject_id))

    async def list(
        self,
        *,
        page: int,
        limit: int,
        sort: EventSortField,
        order: Literal["asc", "desc"],
    ) -> Page[Event]:
        return await self._events.list_page(page=page, limit=limit, sort=sort, order=order)

    async def in_date_range(self, start: datetime, end: datetime) -> list[Event]:
        start, end = check_range(start, end)
        return await self._events.in_date_range(start, end)

    async def at_location(self, location: str) -> list[Event]:
        branch = await self.resolve_branch(location)
        return await self._events.at_location(branch.id)

    async def for_branch_name(self, branch_name: str) -> list[Event]:
        return await self._events.for_branch_name(branch_name)

    async def by_organizer(self, organizer_id: uuid.UUID) -> list[Event]:
        if await self._users.get(organizer_id) is None:
            raise NotFound("Organizer")
        return await self._events.by_organizer(organizer_id)


# --- Module Notes -----------------------------------------------------------
# Images are uploaded only after every lookup succeeded, so a 404 never leaves an
# orphaned blob behind.
