from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.core.config import settings
from vesselbook.models import Vessel, VesselSetting


async def get_for_vessel(db: AsyncSession, vessel_id: int) -> VesselSetting:
    """Settings row of a vessel, created with defaults when missing"""
    result = await db.execute(select(VesselSetting).where(VesselSetting.vessel_id == vessel_id))
    setting = result.scalars().first()
    if setting:
        return setting

    vessel = await db.get(Vessel, vessel_id)
    setting = VesselSetting(
        vessel_id=vessel_id,
        country_code=vessel.country_code if vessel else None,
        currency_code=vessel.currency_code if vessel else None,
        starting_marea_number=1,
    )
    db.add(setting)
    await db.flush()
    return setting


async def default_currency(db: AsyncSession, vessel_id: int) -> str:
    """Vessel setting currency, then the vessel's own, then the configured default"""
    setting = await get_for_vessel(db, vessel_id)
    if setting.currency_code:
        return setting.currency_code.upper()
    vessel = await db.get(Vessel, vessel_id)
    if vessel and vessel.currency_code:
        return vessel.currency_code.upper()
    return settings.DEFAULT_CURRENCY
