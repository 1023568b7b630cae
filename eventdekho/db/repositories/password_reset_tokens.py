from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.db.models.password_reset_token import PasswordResetToken


async def purge_expired_reset_tokens(db: AsyncSession, now: Optional[datetime] = None) -> None:
    now = now or datetime.utcnow()
    await db.execute(delete(PasswordResetToken).where(PasswordResetToken.expires_at < now))
    await db.commit()


async def create_reset_token(db: AsyncSession, user_id: str, token: str) -> PasswordResetToken:
    row = PasswordResetToken(user_id=user_id, token=token)
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


async def get_reset_token(db: AsyncSession, token: str) -> Optional[PasswordResetToken]:
    res = await db.execute(select(PasswordResetToken).where(PasswordResetToken.token == token))
    return res.scalars().first()


async def delete_reset_token(db: AsyncSession, row: PasswordResetToken) -> None:
    await db.delete(row)
    await db.commit()
