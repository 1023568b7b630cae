"""
User queries and the account deletion cascade.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.core.logging import logger
from eventdekho.db.models.base import is_valid_id
from eventdekho.db.models.comment import Comment
from eventdekho.db.models.enums import RoleEnum
from eventdekho.db.models.event import Event
from eventdekho.db.models.like import Like
from eventdekho.db.models.participation import Participation
from eventdekho.db.models.password_reset_token import PasswordResetToken
from eventdekho.db.models.user import User
from eventdekho.db.repositories.events import delete_event_rows

STATUS_PENDING = "pending"
STATUS_VERIFIED = "verified"


async def create_user(db: AsyncSession, fields: dict) -> User:
    """
    Create a new user.

    Args:
        db: Database session
        fields: Column values; the password must already be hashed

    Returns:
        Created User object
    """
    user = User(**fields)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    q = select(User).where(User.email == email)
    res = await db.execute(q)
    return res.scalars().first()


async def get_user(db: AsyncSession, user_id) -> Optional[User]:
    if not is_valid_id(user_id):
        return None
    q = select(User).where(User.id == user_id)
    res = await db.execute(q)
    return res.scalars().first()


async def update_user(db: AsyncSession, user: User, changes: dict) -> User:
    for key, value in changes.items():
        setattr(user, key, value)
    await db.commit()
    await db.refresh(user)
    return user


async def list_users(db: AsyncSession, status: Optional[str] = None) -> List[User]:
    """
    List users, newest first.

    ``pending`` and ``verified`` narrow to organizers in that verification
    state; any other status returns everyone.
    """
    q = select(User)
    if status == STATUS_PENDING:
        q = q.where(User.role == RoleEnum.organizer, User.verified.is_(False))
    elif status == STATUS_VERIFIED:
        q = q.where(User.role == RoleEnum.organizer, User.verified.is_(True))
    res = await db.execute(q.order_by(User.created_at.desc()))
    return list(res.scalars().all())


async def count_users(db: AsyncSession, since: Optional[datetime] = None, until: Optional[datetime] = None) -> int:
    q = select(func.count(User.id))
    if since:
        q = q.where(User.created_at >= since)
    if until:
        q = q.where(User.created_at < until)
    res = await db.execute(q)
    return res.scalar() or 0


async def count_verified_organizers(db: AsyncSession) -> int:
    q = select(func.count(User.id)).where(User.role == RoleEnum.organizer, User.verified.is_(True))
    res = await db.execute(q)
    return res.scalar() or 0


async def _decrement_counters(db: AsyncSession, model, user_id: str, column: str) -> None:
    q = (
        select(model.event_id, func.count(model.id))
        .where(model.user_id == user_id)
        .group_by(model.event_id)
    )
    res = await db.execute(q)
    counter = getattr(Event, column)
    for event_id, n in res.all():
        await db.execute(
            update(Event).where(Event.id == event_id).values({column: counter - n})
        )


async def delete_user_cascade(db: AsyncSession, user: User) -> None:
    """
    Delete a user together with everything they own or touched.

    Their comments and likes are removed and the affected events' counters
    decremented; their participations and reset tokens go too; events they
    organize are deleted along with those events' comments, likes and
    participations. Commits once at the end.
    """
    user_id = str(user.id)

    await db.execute(delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id))

    await _decrement_counters(db, Comment, user_id, "comments")
    await db.execute(delete(Comment).where(Comment.user_id == user_id))

    await _decrement_counters(db, Like, user_id, "likes")
    await db.execute(delete(Like).where(Like.user_id == user_id))

    await db.execute(delete(Participation).where(Participation.user_id == user_id))

    res = await db.execute(select(Event.id).where(Event.organizer_id == user_id))
    event_ids = list(res.scalars().all())
    if event_ids:
        await delete_event_rows(db, event_ids)

    await db.execute(delete(User).where(User.id == user_id))
    await db.commit()
    logger.info(f"Deleted user {user_id} with {len(event_ids)} organized events")
