"""Marea lifecycle: at sea, returned, closed, cancelled"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.core.logging_config import get_logger
from vesselbook.models.marea import MareaStateError
from vesselbook.schemas.marea import MareaStatusChange, MareaDetailResponse
from vesselbook.services import audit
from .core import get_marea, detail_response

logger = get_logger(__name__)
router = APIRouter()


async def _transition(db: AsyncSession, ctx: VesselContext, marea_id: int, action: str,
                      change: Optional[MareaStatusChange]) -> MareaDetailResponse:
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    previous = marea.status_display
    when = change.effective_date if change else None
    try:
        if action == "at_sea":
            marea.mark_at_sea(when)
        elif action == "returned":
            marea.mark_returned(when)
        elif action == "close":
            marea.close()
        else:
            marea.cancel()
    except MareaStateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit.log_action(
        db, ctx, marea, "update",
        f"changed the status of Marea '{marea.marea_number}' from {previous} to {marea.status_display}",
    )
    await db.commit()
    await db.refresh(marea)
    logger.info(f"🚢 Marea {marea.marea_number} is now {marea.status}")
    return await detail_response(db, marea)


@router.post("/{marea_id}/at-sea", response_model=MareaDetailResponse)
async def mark_at_sea(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.manage-status")),
    marea_id: int,
    change: Optional[MareaStatusChange] = None,
) -> Any:
    """preparing -> at_sea; departure date defaults to today"""
    return await _transition(db, ctx, marea_id, "at_sea", change)


@router.post("/{marea_id}/returned", response_model=MareaDetailResponse)
async def mark_returned(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.manage-status")),
    marea_id: int,
    change: Optional[MareaStatusChange] = None,
) -> Any:
    """at_sea -> returned; return date defaults to today"""
    return await _transition(db, ctx, marea_id, "returned", change)


@router.post("/{marea_id}/close", response_model=MareaDetailResponse)
async def close_marea(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.manage-status")),
    marea_id: int,
) -> Any:
    return await _transition(db, ctx, marea_id, "close", None)


@router.post("/{marea_id}/cancel", response_model=MareaDetailResponse)
async def cancel_marea(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.manage-status")),
    marea_id: int,
) -> Any:
    return await _transition(db, ctx, marea_id, "cancel", None)
