"""Vessel settings API"""

from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import VatProfile
from vesselbook.schemas.vessel import VesselSettingResponse, VesselSettingUpdate
from vesselbook.services import audit, vessel_settings

router = APIRouter()


@router.get("/", response_model=VesselSettingResponse)
async def get_settings(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("settings.access")),
) -> Any:
    setting = await vessel_settings.get_for_vessel(db, ctx.vessel_id)
    await db.commit()
    return setting


@router.put("/", response_model=VesselSettingResponse)
async def update_settings(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("settings.access")),
    setting_in: VesselSettingUpdate,
) -> Any:
    setting = await vessel_settings.get_for_vessel(db, ctx.vessel_id)
    update_data = setting_in.model_dump(exclude_unset=True)

    if update_data.get("vat_profile_id"):
        profile = await db.get(VatProfile, update_data["vat_profile_id"])
        if not profile or not profile.is_active:
            raise HTTPException(status_code=404, detail="VAT profile not found")

    before = audit.snapshot(setting)
    for field, value in update_data.items():
        setattr(setting, field, value)
    audit.log_update(db, ctx, setting, before)

    await db.commit()
    await db.refresh(setting)
    return setting
