from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.db.models.participation import Participation


async def create_participation(db: AsyncSession, fields: dict) -> Participation:
    p = Participation(**fields)
    db.add(p)
    await db.commit()
    await db.refresh(p)
    return p


async def list_participations_for_event(db: AsyncSession, event_id: str) -> List[Participation]:
    q = select(Participation).where(Participation.event_id == event_id).order_by(Participation.created_at.desc())
    res = await db.execute(q)
    return list(res.scalars().all())


async def count_participations(db: AsyncSession, since: Optional[datetime] = None, until: Optional[datetime] = None) -> int:
    q = select(func.count(Participation.id))
    if since:
        q = q.where(Participation.created_at >= since)
    if until:
        q = q.where(Participation.created_at < until)
    res = await db.execute(q)
    return res.scalar() or 0
