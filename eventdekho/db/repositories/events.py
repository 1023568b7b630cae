"""
Event queries, including the public feed's visibility filter.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import String, and_, cast, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.core.security import SYSTEM_ADMIN_ID
from eventdekho.db.models.base import is_valid_id
from eventdekho.db.models.comment import Comment
from eventdekho.db.models.event import FREE_FEE, Event
from eventdekho.db.models.like import Like
from eventdekho.db.models.participation import Participation
from eventdekho.db.models.user import User
from eventdekho.services.event_filters import (
    ALL_CATEGORIES,
    PRICE_FREE,
    PRICE_PAID,
    EventFilters,
    date_range_bounds,
)

COUNTER_COLUMNS = ("likes", "comments", "shares")


def visible_to_public():
    """
    Approved events whose organizer is verified, the system admin, or absent.

    Expects the query to be outer-joined to ``users`` on ``organizer_id``;
    organizer ids that are not user ids simply find no user row.
    """
    return and_(
        Event.approved.is_(True),
        or_(
            User.verified.is_(True),
            Event.organizer_id == SYSTEM_ADMIN_ID,
            Event.organizer_id.is_(None),
        ),
    )


def apply_filters(q, filters: EventFilters):
    if filters.category and filters.category != ALL_CATEGORIES:
        q = q.where(Event.category == filters.category)
    if filters.mode:
        q = q.where(Event.mode == filters.mode)
    if filters.entry_type:
        q = q.where(Event.entry_type == filters.entry_type)

    subject_expertise = filters.narrowing(filters.subject_expertise)
    if subject_expertise:
        q = q.where(Event.subject_expertise == subject_expertise)
    experience_required = filters.narrowing(filters.experience_required)
    if experience_required:
        q = q.where(Event.experience_required == experience_required)
    job_type = filters.narrowing(filters.job_type)
    if job_type:
        q = q.where(Event.job_type == job_type)

    if filters.city:
        q = q.where(Event.location.ilike(f"%{filters.city}%"))

    # eligibility is a JSON list of grade strings, e.g. ["9", "10"]
    if filters.eligibility:
        q = q.where(cast(Event.eligibility, String).like(f'%"{filters.eligibility}"%'))

    if filters.price == PRICE_FREE:
        q = q.where(Event.registration_fee == FREE_FEE)
    elif filters.price == PRICE_PAID:
        q = q.where(Event.registration_fee != FREE_FEE)

    bounds = date_range_bounds(filters.date_range)
    if bounds:
        q = q.where(Event.date >= bounds[0], Event.date <= bounds[1])

    text = (filters.query or "").strip()
    if text:
        pattern = f"%{text}%"
        q = q.where(or_(
            Event.title.ilike(pattern),
            Event.description.ilike(pattern),
            Event.location.ilike(pattern),
            Event.teaser.ilike(pattern),
        ))
    return q


async def list_events(db: AsyncSession, filters: EventFilters, include_unapproved: bool = False) -> List[Event]:
    """
    List events for the feed, newest first.

    Args:
        db: Database session
        filters: Narrowing filters from the query string
        include_unapproved: True for admin callers, who see every event

    Returns:
        Matching Event rows
    """
    q = select(Event)
    if not include_unapproved:
        q = q.outerjoin(User, Event.organizer_id == User.id).where(visible_to_public())
    q = apply_filters(q, filters).order_by(Event.created_at.desc())
    res = await db.execute(q)
    return list(res.scalars().all())


async def get_event(db: AsyncSession, event_id) -> Optional[Event]:
    if not is_valid_id(event_id):
        return None
    res = await db.execute(select(Event).where(Event.id == event_id))
    return res.scalars().first()


async def create_event(db: AsyncSession, fields: dict) -> Event:
    ev = Event(**fields)
    db.add(ev)
    await db.commit()
    await db.refresh(ev)
    return ev


async def update_event(db: AsyncSession, ev: Event, changes: dict) -> Event:
    for key, value in changes.items():
        setattr(ev, key, value)
    ev.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(ev)
    return ev


async def increment_counter(db: AsyncSession, event_id: str, column: str, delta: int = 1) -> Optional[int]:
    """
    Atomically add ``delta`` to one of the engagement counters and return the new value.

    Returns None when the event does not exist.
    """
    if column not in COUNTER_COLUMNS:
        raise ValueError(f"Unknown counter column: {column}")
    counter = getattr(Event, column)
    res = await db.execute(
        update(Event).where(Event.id == event_id).values({column: counter + delta})
    )
    await db.commit()
    if res.rowcount == 0:
        return None
    value = await db.execute(select(counter).where(Event.id == event_id))
    return value.scalar()


async def delete_event_rows(db: AsyncSession, event_ids) -> None:
    """Delete events and everything hanging off them. Does not commit."""
    await db.execute(delete(Comment).where(Comment.event_id.in_(event_ids)))
    await db.execute(delete(Like).where(Like.event_id.in_(event_ids)))
    await db.execute(delete(Participation).where(Participation.event_id.in_(event_ids)))
    await db.execute(delete(Event).where(Event.id.in_(event_ids)))


async def delete_event(db: AsyncSession, event_id: str) -> None:
    await delete_event_rows(db, [event_id])
    await db.commit()


async def list_events_liked_by(db: AsyncSession, user_id: str) -> List[Event]:
    q = (
        select(Event)
        .join(Like, Like.event_id == Event.id)
        .where(Like.user_id == user_id)
        .order_by(Event.created_at.desc())
    )
    res = await db.execute(q)
    return list(res.scalars().all())


async def count_events(db: AsyncSession, since: Optional[datetime] = None, until: Optional[datetime] = None) -> int:
    q = select(func.count(Event.id))
    if since:
        q = q.where(Event.created_at >= since)
    if until:
        q = q.where(Event.created_at < until)
    res = await db.execute(q)
    return res.scalar() or 0
