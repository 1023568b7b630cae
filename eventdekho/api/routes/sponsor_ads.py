from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.auth import admin_required
from eventdekho.core.principal import Principal
from eventdekho.db.session import get_session
from eventdekho.schemas import MessageResponse, SponsorAdOut
from eventdekho.services.sponsor_ad_service import SponsorAdService

router = APIRouter(prefix="/ads", tags=["sponsor ads"])


def get_sponsor_ad_service(session: AsyncSession = Depends(get_session)) -> SponsorAdService:
    return SponsorAdService(session)


@router.get("/active", response_model=List[SponsorAdOut])
async def list_active_ads(ad_service: SponsorAdService = Depends(get_sponsor_ad_service)):
    """Running and upcoming campaigns, soonest start first. Ended ads are left out."""
    return await ad_service.list_active()


@router.get("/all", response_model=List[SponsorAdOut])
async def list_every_ad(ad_service: SponsorAdService = Depends(get_sponsor_ad_service)):
    return await ad_service.list_all()


@router.get("", response_model=List[SponsorAdOut], dependencies=[Depends(admin_required)])
async def list_ads_admin(ad_service: SponsorAdService = Depends(get_sponsor_ad_service)):
    return await ad_service.list_all()


@router.post("", response_model=SponsorAdOut, status_code=status.HTTP_201_CREATED)
async def create_ad(
    body: Dict[str, Any] = Body(...),
    principal: Principal = Depends(admin_required),
    ad_service: SponsorAdService = Depends(get_sponsor_ad_service)
):
    """Create a campaign. Invalid payloads answer 400 'Failed to create ad' with the reason."""
    return await ad_service.create_ad(principal, body)


@router.delete("/{ad_id}", response_model=MessageResponse, dependencies=[Depends(admin_required)])
async def delete_ad(
    ad_id: str,
    ad_service: SponsorAdService = Depends(get_sponsor_ad_service)
):
    await ad_service.delete_ad(ad_id)
    return MessageResponse(message="Ad deleted successfully")
