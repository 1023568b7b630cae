from typing import List

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.core.config import settings
from eventdekho.core.errors import IntegrationError
from eventdekho.core.logging import logger
from eventdekho.core.principal import Principal, principal_id
from eventdekho.db.models.participation import Participation
from eventdekho.db.repositories import create_participation, get_event, list_participations_for_event
from eventdekho.schemas import ParticipationCreate
from eventdekho.services import email_service

REGISTRATION_FAILED = "Failed to submit registration. Please try again."


class ParticipationService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def register(self, principal: Principal, payload: ParticipationCreate) -> Participation:
        """
        Save a registration snapshot, then email the organizer and the participant.

        The row stays saved even when an email fails; the caller still gets a
        500 in that case.
        """
        p = payload.participant
        if not payload.event_id or not p or not p.name or not p.email or not p.phone or not p.emergency_contact:
            raise HTTPException(status_code=400, detail="Missing required fields")

        ev = await get_event(self.session, payload.event_id)
        if not ev:
            raise HTTPException(status_code=404, detail="Event not found")

        row = await create_participation(self.session, {
            **p.model_dump(),
            "event_id": str(ev.id),
            "user_id": principal_id(principal),
        })
        logger.info(f"Registration {row.id} saved for event {ev.id}")

        organizer_email = ev.organizer_email or settings.ADMIN_EMAIL
        try:
            await email_service.send_registration_emails(organizer_email, ev, p)
        except IntegrationError as e:
            logger.error(f"Registration {row.id} saved but emails failed: {e.message} ({e.error})")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=REGISTRATION_FAILED)
        return row

    async def list_for_event(self, principal: Principal, event_id: str) -> List[Participation]:
        ev = await get_event(self.session, event_id)
        if not ev:
            raise HTTPException(status_code=404, detail="Event not found")
        if not principal.is_admin and ev.organizer_id != principal_id(principal):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to view these registrations")
        return await list_participations_for_event(self.session, str(ev.id))
