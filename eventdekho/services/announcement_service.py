from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.core.principal import Principal, principal_id
from eventdekho.db.models.announcement import Announcement
from eventdekho.db.models.enums import AnnouncementCategory, AnnouncementPriority
from eventdekho.db.repositories import (
    create_announcement,
    delete_announcement,
    get_announcement,
    increment_announcement_counter,
    list_all_announcements,
    list_live_announcements,
    update_announcement,
)
from eventdekho.schemas import AnnouncementCreate, AnnouncementUpdate


class AnnouncementService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_live(self, category: Optional[str], limit: int) -> List[Announcement]:
        return await list_live_announcements(self.session, datetime.utcnow(), category=category, limit=limit)

    async def list_all(self) -> List[Announcement]:
        return await list_all_announcements(self.session)

    async def _get(self, announcement_id: str) -> Announcement:
        a = await get_announcement(self.session, announcement_id)
        if not a:
            raise HTTPException(status_code=404, detail="Announcement not found")
        return a

    async def view(self, announcement_id: str) -> Announcement:
        """Fetch an announcement and count the view."""
        a = await self._get(announcement_id)
        await increment_announcement_counter(self.session, str(a.id), "views")
        return a

    async def create(self, principal: Principal, payload: AnnouncementCreate) -> Announcement:
        if not payload.title or not payload.content:
            raise HTTPException(status_code=400, detail="Title and content are required")

        fields = payload.model_dump(exclude_none=True)
        fields.setdefault("category", AnnouncementCategory.general)
        fields.setdefault("priority", AnnouncementPriority.medium)
        fields.setdefault("tags", [])
        return await create_announcement(self.session, {
            **fields,
            "author_id": principal_id(principal),
            "author_name": principal.name or "Admin",
            "author_email": principal.email,
        })

    async def update(self, announcement_id: str, payload: AnnouncementUpdate) -> Announcement:
        a = await self._get(announcement_id)
        changes = {}
        # Blank title/content/category/priority/tags leave the stored value alone
        for field in ("title", "content", "category", "priority", "tags"):
            value = getattr(payload, field)
            if value:
                changes[field] = value
        for field in ("link", "is_active", "expires_at"):
            if field in payload.model_fields_set:
                changes[field] = getattr(payload, field)
        if changes.get("is_active") is None:
            changes.pop("is_active", None)
        return await update_announcement(self.session, a, changes)

    async def delete(self, announcement_id: str) -> None:
        a = await self._get(announcement_id)
        await delete_announcement(self.session, a)

    async def click(self, announcement_id: str) -> None:
        await increment_announcement_counter(self.session, announcement_id, "clicks")
