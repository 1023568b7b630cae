from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.auth import get_current_user
from eventdekho.core.principal import Principal
from eventdekho.db.session import get_session
from eventdekho.schemas import MessageResponse, ParticipationCreate, ParticipationOut
from eventdekho.services.participation_service import ParticipationService

router = APIRouter(prefix="/participation", tags=["participation"])


def get_participation_service(session: AsyncSession = Depends(get_session)) -> ParticipationService:
    return ParticipationService(session)


@router.post("", response_model=MessageResponse)
async def register_for_event(
    payload: ParticipationCreate,
    principal: Principal = Depends(get_current_user),
    participation_service: ParticipationService = Depends(get_participation_service)
):
    """
    Register the caller for an event and email the organizer and participant.

    Both emails are sent before answering. If either fails the registration
    is still stored but the response is a 500.
    """
    await participation_service.register(principal, payload)
    return MessageResponse(message="Registration successful! Confirmation emails sent.")


@router.get("/event/{event_id}", response_model=List[ParticipationOut])
async def list_registrations(
    event_id: str,
    principal: Principal = Depends(get_current_user),
    participation_service: ParticipationService = Depends(get_participation_service)
):
    """Registrations for an event; visible to its organizer and admins."""
    return await participation_service.list_for_event(principal, event_id)
