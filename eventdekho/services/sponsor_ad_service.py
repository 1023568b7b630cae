from datetime import datetime
from typing import List

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.cache.cache_decorators import cached
from eventdekho.cache.redis_client import cache
from eventdekho.core.logging import logger
from eventdekho.core.principal import Principal, SystemAdmin
from eventdekho.db.models.sponsor_ad import SponsorAd
from eventdekho.db.repositories import create_ad, delete_ad, get_ad, list_ads, list_running_and_upcoming_ads
from eventdekho.schemas import SponsorAdCreate, SponsorAdOut

ACTIVE_ADS_CACHE = "ads:active"


@cached(ACTIVE_ADS_CACHE, expire=60)
async def active_ads(db: AsyncSession) -> List[dict]:
    """Running and upcoming ads as JSON-ready dicts, cached for a minute."""
    ads = await list_running_and_upcoming_ads(db, datetime.utcnow())
    return [SponsorAdOut.model_validate(ad).model_dump(mode="json", by_alias=True) for ad in ads]


def _create_failed(error: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": "Failed to create ad", "error": error},
    )


class SponsorAdService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_active(self) -> List[dict]:
        # The cached list can outlive an ad's end date by up to a minute
        now = datetime.utcnow()
        return [ad for ad in await active_ads(self.session) if datetime.fromisoformat(ad["endDate"]) >= now]

    async def list_all(self) -> List[SponsorAd]:
        return await list_ads(self.session)

    async def create_ad(self, principal: Principal, body: dict) -> SponsorAd:
        """
        Validate and store a campaign.

        Raises:
            HTTPException: 400 ``Failed to create ad`` for invalid payloads or a
                duplicate ``internalAdId``
        """
        try:
            payload = SponsorAdCreate.model_validate(body)
        except ValidationError as e:
            raise _create_failed("; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()))

        fields = payload.model_dump()
        # The system admin has no users row to point at
        fields["created_by"] = None if isinstance(principal, SystemAdmin) else str(principal.id)

        try:
            ad = await create_ad(self.session, fields)
        except IntegrityError:
            await self.session.rollback()
            raise _create_failed(f"internalAdId '{payload.internal_ad_id}' already exists")

        await cache.delete_pattern(f"{ACTIVE_ADS_CACHE}:*")
        logger.info(f"Sponsor ad {ad.id} ({ad.internal_ad_id}) created")
        return ad

    async def delete_ad(self, ad_id: str) -> None:
        ad = await get_ad(self.session, ad_id)
        if not ad:
            raise HTTPException(status_code=404, detail="Ad not found")
        await delete_ad(self.session, ad)
        await cache.delete_pattern(f"{ACTIVE_ADS_CACHE}:*")
