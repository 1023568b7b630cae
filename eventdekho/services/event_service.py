from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.core.logging import logger
from eventdekho.core.principal import Principal, principal_id
from eventdekho.db.models.enums import MediaType
from eventdekho.db.models.event import Event
from eventdekho.db.repositories import (
    create_event as db_create_event,
    create_like,
    delete_event as db_delete_event,
    delete_like,
    get_event as db_get_event,
    get_like,
    increment_counter,
    list_events as db_list_events,
    list_events_liked_by,
    update_event as db_update_event,
)
from eventdekho.schemas import EventCreate, EventUpdate, LikeToggleOut
from eventdekho.services.event_filters import EventFilters


def derive_media_type(images: List[str], video: Optional[str], requested: Optional[MediaType]) -> MediaType:
    if video:
        return MediaType.video
    if images:
        return MediaType.image
    return requested or MediaType.image


class EventService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_events(self, principal: Optional[Principal], filters: EventFilters, show_all: bool = False) -> List[Event]:
        is_admin = show_all or bool(principal and principal.is_admin)
        return await db_list_events(self.session, filters, include_unapproved=is_admin)

    async def get_event(self, event_id: str) -> Event:
        ev = await db_get_event(self.session, event_id)
        if not ev:
            raise HTTPException(status_code=404, detail="Event not found")
        return ev

    async def create_event(self, principal: Principal, payload: EventCreate) -> Event:
        """
        Create an event on behalf of the caller.

        Raises:
            HTTPException: 403 if the caller is an unverified non-admin or posts
                for another organizer, 400 if required fields are missing
        """
        if not principal.is_admin and not principal.verified:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="First wait until admin verify you.")

        if payload.missing_required():
            raise HTTPException(status_code=400, detail="Missing required fields")

        if not principal.is_admin and payload.organizer_id != principal_id(principal):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Unauthorized: You can only create events for yourself.",
            )

        fields = payload.model_dump(exclude={"approved", "media_type"})
        fields["approved"] = payload.approved if payload.approved is not None else True
        fields["media_type"] = derive_media_type(payload.images, payload.video, payload.media_type)
        fields["image"] = payload.images[0] if payload.images else ""

        ev = await db_create_event(self.session, fields)
        logger.info(f"Event {ev.id} created by {principal_id(principal)}")
        return ev

    async def _owned_event(self, principal: Principal, event_id: str, action: str) -> Event:
        ev = await self.get_event(event_id)
        if not principal.is_admin and ev.organizer_id != principal_id(principal):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Not authorized to {action} this event")
        return ev

    async def update_event(self, principal: Principal, event_id: str, payload: EventUpdate) -> Event:
        ev = await self._owned_event(principal, event_id, "update")

        changes = payload.model_dump(exclude_unset=True)
        if "approved" in changes and not principal.is_admin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only admins can change event approval")

        columns = Event.__table__.columns
        cleared = sorted(
            field for field, value in changes.items()
            if value is None and field in columns and not columns[field].nullable
        )
        if cleared:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Missing required fields", "error": f"{', '.join(cleared)} cannot be null"},
            )

        if "images" in changes:
            changes["images"] = changes["images"] or []
            changes["image"] = changes["images"][0] if changes["images"] else ""
        if "images" in changes or "video" in changes:
            changes["media_type"] = derive_media_type(
                changes.get("images", ev.images or []),
                changes.get("video", ev.video),
                changes.get("media_type"),
            )
        return await db_update_event(self.session, ev, changes)

    async def delete_event(self, principal: Principal, event_id: str) -> None:
        ev = await self._owned_event(principal, event_id, "delete")
        await db_delete_event(self.session, str(ev.id))
        logger.info(f"Event {event_id} deleted by {principal_id(principal)}")

    async def toggle_like(self, event_id: str, user_id: Optional[str]) -> LikeToggleOut:
        """Like the event if the user hasn't yet, otherwise take the like back."""
        if not user_id:
            raise HTTPException(status_code=400, detail="userId is required")
        ev = await self.get_event(event_id)

        existing = await get_like(self.session, user_id, str(ev.id))
        if existing:
            await delete_like(self.session, existing)
            likes = await increment_counter(self.session, str(ev.id), "likes", -1)
            return LikeToggleOut(liked=False, likes=likes or 0)

        try:
            await create_like(self.session, user_id, str(ev.id))
        except IntegrityError:
            await self.session.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Event already liked")
        likes = await increment_counter(self.session, str(ev.id), "likes", 1)
        return LikeToggleOut(liked=True, likes=likes or 0)

    async def like_status(self, event_id: str, user_id: Optional[str]) -> bool:
        if not user_id:
            return False
        return await get_like(self.session, user_id, event_id) is not None

    async def share(self, event_id: str) -> int:
        shares = await increment_counter(self.session, event_id, "shares", 1)
        if shares is None:
            raise HTTPException(status_code=404, detail="Event not found")
        return shares

    async def liked_by(self, user_id: str) -> List[Event]:
        return await list_events_liked_by(self.session, user_id)
