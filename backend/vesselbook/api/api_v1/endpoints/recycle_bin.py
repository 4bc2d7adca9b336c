"""Recycle bin API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.core.logging_config import get_logger
from vesselbook.schemas.recycle_bin import RecycleBinResponse, EmptyResponse
from vesselbook.services import recycle_bin

logger = get_logger(__name__)
router = APIRouter()


async def get_item(db: AsyncSession, vessel_id: int, type_name: str, item_id: int):
    try:
        obj = await recycle_bin.get_trashed(db, vessel_id, type_name, item_id)
    except recycle_bin.UnknownTrashType:
        raise HTTPException(status_code=404, detail=f"Unknown item type '{type_name}'")
    if not obj:
        raise HTTPException(status_code=404, detail="Item not found in the recycle bin")
    return obj


@router.get("/", response_model=RecycleBinResponse)
async def list_trashed(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("recycle_bin.view")),
    type: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
) -> Any:
    if type and type not in recycle_bin.TRASH_TYPES:
        raise HTTPException(status_code=404, detail=f"Unknown item type '{type}'")
    items, counts = await recycle_bin.list_items(db, ctx.vessel_id, type, search)
    return RecycleBinResponse(data=items, counts=counts, total=sum(counts.values()))


@router.post("/{type}/{item_id}/restore")
async def restore_item(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("recycle_bin.restore")),
    type: str,
    item_id: int,
) -> Any:
    obj = await get_item(db, ctx.vessel_id, type, item_id)
    await recycle_bin.restore(db, ctx, type, obj)
    await db.commit()
    return {"message": f"{recycle_bin.trash_type(type).title} restored"}


@router.delete("/{type}/{item_id}")
async def destroy_item(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("recycle_bin.delete")),
    type: str,
    item_id: int,
) -> Any:
    obj = await get_item(db, ctx.vessel_id, type, item_id)
    await recycle_bin.force_delete(db, ctx, type, obj)
    await db.commit()
    return {"message": f"{recycle_bin.trash_type(type).title} permanently deleted"}


@router.delete("/", response_model=EmptyResponse)
async def empty_recycle_bin(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("recycle_bin.delete")),
) -> Any:
    deleted = await recycle_bin.empty(db, ctx, ctx.vessel_id)
    await db.commit()
    logger.info(f"🗑️ Recycle bin of vessel {ctx.vessel_id} emptied: {deleted} item(s)")
    return EmptyResponse(message="Recycle bin emptied", deleted=deleted)
