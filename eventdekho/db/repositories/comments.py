from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.db.models.base import is_valid_id
from eventdekho.db.models.comment import Comment
from eventdekho.db.models.event import Event


async def create_comment(db: AsyncSession, fields: dict) -> Comment:
    comment = Comment(**fields)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return comment


async def get_comment(db: AsyncSession, comment_id) -> Optional[Comment]:
    if not is_valid_id(comment_id):
        return None
    res = await db.execute(select(Comment).where(Comment.id == comment_id))
    return res.scalars().first()


async def list_comments_for_event(db: AsyncSession, event_id: str) -> List[Comment]:
    q = select(Comment).where(Comment.event_id == event_id).order_by(Comment.created_at.desc())
    res = await db.execute(q)
    return list(res.scalars().all())


async def list_comments_by_user(db: AsyncSession, user_id: str) -> List[Tuple[Comment, Optional[str]]]:
    """
    A user's comments, newest first, each paired with its event's title.

    The title is None when the event no longer exists.
    """
    q = (
        select(Comment, Event.title)
        .outerjoin(Event, Comment.event_id == Event.id)
        .where(Comment.user_id == user_id)
        .order_by(Comment.created_at.desc())
    )
    res = await db.execute(q)
    return [(row[0], row[1]) for row in res.all()]


async def update_comment_text(db: AsyncSession, comment: Comment, text: str) -> Comment:
    comment.text = text
    await db.commit()
    await db.refresh(comment)
    return comment


async def delete_comment(db: AsyncSession, comment: Comment) -> None:
    await db.delete(comment)
    await db.commit()
