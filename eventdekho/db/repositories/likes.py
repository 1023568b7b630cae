from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.db.models.like import Like


async def get_like(db: AsyncSession, user_id: str, event_id: str) -> Optional[Like]:
    q = select(Like).where(Like.user_id == user_id, Like.event_id == event_id)
    res = await db.execute(q)
    return res.scalars().first()


async def create_like(db: AsyncSession, user_id: str, event_id: str) -> Like:
    """
    Insert a like.

    Raises:
        IntegrityError: If the user already likes the event (uq_like_user_event)
    """
    like = Like(user_id=user_id, event_id=event_id)
    db.add(like)
    await db.commit()
    return like


async def delete_like(db: AsyncSession, like: Like) -> None:
    await db.delete(like)
    await db.commit()
