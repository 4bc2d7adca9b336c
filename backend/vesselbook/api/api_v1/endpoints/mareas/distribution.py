"""Marea distribution result and per-marea override items"""

from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import MareaDistributionItem
from vesselbook.schemas.distribution import DistributionResult, MareaDistributionItemIn
from vesselbook.services import audit, mareas as marea_service
from vesselbook.services.distribution import DistributionError
from .core import get_marea, ensure_unlocked

router = APIRouter()


@router.get("/{marea_id}/distribution", response_model=DistributionResult)
async def get_distribution(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.view")),
    marea_id: int,
) -> Any:
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    return await marea_service.calculate(db, marea)


@router.put("/{marea_id}/distribution", response_model=DistributionResult)
async def set_distribution_items(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.edit")),
    marea_id: int,
    items_in: List[MareaDistributionItemIn],
) -> Any:
    """Replace the marea's own items; they take precedence over the profile"""
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    ensure_unlocked(marea)
    try:
        await marea_service.replace_items(db, MareaDistributionItem, items_in, marea_id=marea.id)
    except DistributionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit.log_action(db, ctx, marea, "update", f"replaced the distribution items of Marea '{marea.marea_number}'")
    await db.commit()
    return await marea_service.calculate(db, marea)


@router.delete("/{marea_id}/distribution", response_model=DistributionResult)
async def reset_distribution_items(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.edit")),
    marea_id: int,
) -> Any:
    """Drop the overrides and fall back to the profile"""
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    ensure_unlocked(marea)
    await db.execute(delete(MareaDistributionItem).where(MareaDistributionItem.marea_id == marea.id))
    await db.commit()
    return await marea_service.calculate(db, marea)
