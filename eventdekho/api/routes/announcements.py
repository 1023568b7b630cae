from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.auth import admin_required
from eventdekho.core.principal import Principal
from eventdekho.db.session import get_session
from eventdekho.schemas import AnnouncementCreate, AnnouncementOut, AnnouncementUpdate, MessageResponse
from eventdekho.services.announcement_service import AnnouncementService

router = APIRouter(prefix="/announcements", tags=["announcements"])


def get_announcement_service(session: AsyncSession = Depends(get_session)) -> AnnouncementService:
    return AnnouncementService(session)


@router.get("", response_model=List[AnnouncementOut])
async def list_announcements(
    category: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=100),
    announcement_service: AnnouncementService = Depends(get_announcement_service)
):
    """Active, unexpired announcements; high priority first, then newest."""
    return await announcement_service.list_live(category, limit)


@router.get("/admin/all", response_model=List[AnnouncementOut], dependencies=[Depends(admin_required)])
async def list_all_announcements(announcement_service: AnnouncementService = Depends(get_announcement_service)):
    return await announcement_service.list_all()


@router.get("/{announcement_id}", response_model=AnnouncementOut)
async def get_announcement(
    announcement_id: str,
    announcement_service: AnnouncementService = Depends(get_announcement_service)
):
    return await announcement_service.view(announcement_id)


@router.post("", response_model=AnnouncementOut, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: AnnouncementCreate,
    principal: Principal = Depends(admin_required),
    announcement_service: AnnouncementService = Depends(get_announcement_service)
):
    return await announcement_service.create(principal, payload)


@router.put("/{announcement_id}", response_model=AnnouncementOut, dependencies=[Depends(admin_required)])
async def update_announcement(
    announcement_id: str,
    payload: AnnouncementUpdate,
    announcement_service: AnnouncementService = Depends(get_announcement_service)
):
    return await announcement_service.update(announcement_id, payload)


@router.delete("/{announcement_id}", response_model=MessageResponse, dependencies=[Depends(admin_required)])
async def delete_announcement(
    announcement_id: str,
    announcement_service: AnnouncementService = Depends(get_announcement_service)
):
    await announcement_service.delete(announcement_id)
    return MessageResponse(message="Announcement deleted successfully")


@router.post("/{announcement_id}/click", response_model=MessageResponse)
async def track_click(
    announcement_id: str,
    announcement_service: AnnouncementService = Depends(get_announcement_service)
):
    await announcement_service.click(announcement_id)
    return MessageResponse(message="Click tracked successfully")
