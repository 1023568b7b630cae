from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import BackgroundTasks, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.core.logging import logger
from eventdekho.core.principal import Principal, principal_id
from eventdekho.db.models.user import User
from eventdekho.db.repositories import (
    count_events,
    count_participations,
    count_users,
    count_verified_organizers,
    delete_user_cascade,
    get_user,
    list_users,
    update_user,
)
from eventdekho.schemas import AdminStats
from eventdekho.services import email_service

GROWTH_WINDOW = timedelta(days=30)


def growth_percent(current: int, previous: int) -> int:
    """Whole-number percentage change from the previous window to the current one."""
    if previous == 0:
        return 100 if current > 0 else 0
    return round((current - previous) * 100 / previous)


class AdminService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_users(self, status: Optional[str]) -> List[User]:
        return await list_users(self.session, status)

    async def _growth(self, count, now: datetime) -> int:
        window_start = now - GROWTH_WINDOW
        current = await count(self.session, since=window_start, until=now)
        previous = await count(self.session, since=window_start - GROWTH_WINDOW, until=window_start)
        return growth_percent(current, previous)

    async def stats(self, now: Optional[datetime] = None) -> AdminStats:
        """
        Dashboard totals plus growth of the last 30 days over the 30 before.

        Growth covers new accounts, new events and new event registrations.
        """
        now = now or datetime.utcnow()
        return AdminStats(
            total_users=await count_users(self.session),
            verified_orgs=await count_verified_organizers(self.session),
            events_posted=await count_events(self.session),
            registrations_growth=await self._growth(count_users, now),
            event_creation_growth=await self._growth(count_events, now),
            engagement_growth=await self._growth(count_participations, now),
        )

    async def _get_user(self, user_id: str) -> User:
        user = await get_user(self.session, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    async def set_verified(self, user_id: str, verified: bool, background_tasks: BackgroundTasks) -> User:
        """Verify or reject an account; verifying also queues a notification email."""
        user = await self._get_user(user_id)
        user = await update_user(self.session, user, {"verified": verified})
        if verified:
            background_tasks.add_task(email_service.notify_verified, user.email, user.name)
        logger.info(f"User {user.id} {'verified' if verified else 'rejected'}")
        return user

    async def delete_user(self, admin: Principal, user_id: str) -> None:
        user = await self._get_user(user_id)
        await delete_user_cascade(self.session, user)
        logger.info(f"Admin {principal_id(admin)} deleted user {user_id}")

    async def send_test_email(self) -> str:
        return await email_service.send_test_email()
