from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.db.models.base import is_valid_id
from eventdekho.db.models.sponsor_ad import SponsorAd


async def create_ad(db: AsyncSession, fields: dict) -> SponsorAd:
    """
    Raises:
        IntegrityError: If ``internal_ad_id`` is already taken
    """
    ad = SponsorAd(**fields)
    db.add(ad)
    await db.commit()
    await db.refresh(ad)
    return ad


async def get_ad(db: AsyncSession, ad_id) -> Optional[SponsorAd]:
    if not is_valid_id(ad_id):
        return None
    res = await db.execute(select(SponsorAd).where(SponsorAd.id == ad_id))
    return res.scalars().first()


async def list_ads(db: AsyncSession) -> List[SponsorAd]:
    res = await db.execute(select(SponsorAd).order_by(SponsorAd.created_at.desc()))
    return list(res.scalars().all())


async def list_running_and_upcoming_ads(db: AsyncSession, now: datetime) -> List[SponsorAd]:
    """Ads that have not ended yet, soonest start first."""
    q = (
        select(SponsorAd)
        .where(SponsorAd.end_date >= now)
        .order_by(SponsorAd.start_date.asc(), SponsorAd.created_at.desc())
    )
    res = await db.execute(q)
    return list(res.scalars().all())


async def delete_ad(db: AsyncSession, ad: SponsorAd) -> None:
    await db.delete(ad)
    await db.commit()
