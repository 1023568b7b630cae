from datetime import datetime
from typing import List, Optional

from sqlalchemy import case, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.db.models.announcement import Announcement
from eventdekho.db.models.base import is_valid_id
from eventdekho.db.models.enums import AnnouncementPriority

# Higher rank sorts first
PRIORITY_RANK = {
    AnnouncementPriority.high: 3,
    AnnouncementPriority.medium: 2,
    AnnouncementPriority.low: 1,
}

priority_rank = case(
    *[(Announcement.priority == priority, rank) for priority, rank in PRIORITY_RANK.items()],
    else_=0,
)


async def create_announcement(db: AsyncSession, fields: dict) -> Announcement:
    a = Announcement(**fields)
    db.add(a)
    await db.commit()
    await db.refresh(a)
    return a


async def get_announcement(db: AsyncSession, announcement_id) -> Optional[Announcement]:
    if not is_valid_id(announcement_id):
        return None
    res = await db.execute(select(Announcement).where(Announcement.id == announcement_id))
    return res.scalars().first()


async def list_live_announcements(
    db: AsyncSession,
    now: datetime,
    category: Optional[str] = None,
    limit: int = 10,
) -> List[Announcement]:
    """Active, unexpired announcements: highest priority first, then newest."""
    q = select(Announcement).where(
        Announcement.is_active.is_(True),
        or_(Announcement.expires_at.is_(None), Announcement.expires_at > now),
    )
    if category and category != "all":
        q = q.where(Announcement.category == category)
    q = q.order_by(priority_rank.desc(), Announcement.created_at.desc()).limit(limit)
    res = await db.execute(q)
    return list(res.scalars().all())


async def list_all_announcements(db: AsyncSession) -> List[Announcement]:
    res = await db.execute(select(Announcement).order_by(Announcement.created_at.desc()))
    return list(res.scalars().all())


async def update_announcement(db: AsyncSession, a: Announcement, changes: dict) -> Announcement:
    for key, value in changes.items():
        setattr(a, key, value)
    await db.commit()
    await db.refresh(a)
    return a


async def delete_announcement(db: AsyncSession, a: Announcement) -> None:
    await db.delete(a)
    await db.commit()


async def increment_announcement_counter(db: AsyncSession, announcement_id: str, column: str) -> bool:
    """Atomically bump ``views`` or ``clicks``. Returns False when no row matched."""
    if column not in ("views", "clicks"):
        raise ValueError(f"Unknown counter column: {column}")
    if not is_valid_id(announcement_id):
        return False
    counter = getattr(Announcement, column)
    res = await db.execute(
        update(Announcement).where(Announcement.id == announcement_id).values({column: counter + 1})
    )
    await db.commit()
    return res.rowcount > 0
