from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.auth import get_current_user, get_optional_user
from eventdekho.core.principal import Principal
from eventdekho.db.session import get_session
from eventdekho.schemas import (
    EventCreate,
    EventOut,
    EventUpdate,
    LikeRequest,
    LikeStatusOut,
    LikeToggleOut,
    MessageResponse,
    ShareOut,
)
from eventdekho.services.event_filters import ALL_CATEGORIES, EventFilters
from eventdekho.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(session: AsyncSession = Depends(get_session)) -> EventService:
    return EventService(session)


@router.get("/user/liked/{user_id}", response_model=List[EventOut])
async def get_liked_events(
    user_id: str,
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.liked_by(user_id)


@router.get("", response_model=List[EventOut])
async def list_events(
    query: str = Query("", description="Case-insensitive text over title, description, location and teaser"),
    category: str = Query(ALL_CATEGORIES, description="Event category, or 'all'"),
    show_all: Optional[str] = Query(None, alias="showAll", description="'true' to include unapproved events"),
    mode: Optional[str] = Query(None, description="online, offline or hybrid"),
    city: Optional[str] = Query(None, description="Substring of the event location"),
    eligibility: Optional[str] = Query(None, description="Grade that must be eligible"),
    price: Optional[str] = Query(None, description="Free or Paid"),
    date_range: Optional[str] = Query(None, alias="dateRange", description="Today, This Weekend or Next 30 Days"),
    entry_type: Optional[str] = Query(None, alias="entryType"),
    subject_expertise: Optional[str] = Query(None, alias="subjectExpertise"),
    experience_required: Optional[str] = Query(None, alias="experienceRequired"),
    job_type: Optional[str] = Query(None, alias="jobType"),
    principal: Optional[Principal] = Depends(get_optional_user),
    event_service: EventService = Depends(get_event_service)
):
    """
    List events, newest first.

    Admin callers (or showAll=true) see every event. Everyone else sees
    approved events from verified organizers, the system admin, or with no
    organizer at all. The remaining parameters narrow either listing;
    'NA' for the professional-listing filters means no filter.
    """
    filters = EventFilters(
        query=query,
        category=category,
        mode=mode,
        entry_type=entry_type,
        subject_expertise=subject_expertise,
        experience_required=experience_required,
        job_type=job_type,
        city=city,
        eligibility=eligibility,
        price=price,
        date_range=date_range,
    )
    return await event_service.list_events(principal, filters, show_all=show_all == "true")


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    principal: Principal = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    """
    Create an event. Media are URLs previously returned by /api/upload.

    Only verified organizers and admins may post, and non-admins only for themselves.
    """
    return await event_service.create_event(principal, payload)


@router.post("/json", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event_json(
    payload: EventCreate,
    principal: Principal = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.create_event(principal, payload)


@router.get("/{event_id}", response_model=EventOut)
async def get_event(
    event_id: str,
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.get_event(event_id)


@router.put("/{event_id}", response_model=EventOut)
async def update_event(
    event_id: str,
    payload: EventUpdate,
    principal: Principal = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.update_event(principal, event_id, payload)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    principal: Principal = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    await event_service.delete_event(principal, event_id)
    return MessageResponse(message="Event deleted successfully")


@router.post("/{event_id}/like", response_model=LikeToggleOut)
async def toggle_like(
    event_id: str,
    payload: LikeRequest,
    event_service: EventService = Depends(get_event_service)
):
    """Like the event for userId, or unlike it if already liked."""
    return await event_service.toggle_like(event_id, payload.user_id)


@router.get("/{event_id}/like-status", response_model=LikeStatusOut)
async def like_status(
    event_id: str,
    user_id: Optional[str] = Query(None, alias="userId"),
    event_service: EventService = Depends(get_event_service)
):
    return LikeStatusOut(liked=await event_service.like_status(event_id, user_id))


@router.post("/{event_id}/share", response_model=ShareOut)
async def share_event(
    event_id: str,
    event_service: EventService = Depends(get_event_service)
):
    return ShareOut(shares=await event_service.share(event_id))
