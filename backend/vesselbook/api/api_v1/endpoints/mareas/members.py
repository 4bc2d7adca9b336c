"""Marea crew, quantity returns and attached transactions"""

from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import get_or_404, count
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import MareaCrew, MareaQuantityReturn, Transaction, User
from vesselbook.schemas.marea import (
    MareaCrewIn, MareaDetailResponse, QuantityReturnIn, AttachTransaction,
)
from vesselbook.services import audit
from .core import get_marea, ensure_unlocked, detail_response

router = APIRouter()


@router.post("/{marea_id}/crew", response_model=MareaDetailResponse)
async def add_crew(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.edit")),
    marea_id: int,
    crew_in: MareaCrewIn,
) -> Any:
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    ensure_unlocked(marea)
    user = await get_or_404(db, User, crew_in.user_id, ctx.vessel_id, "Crew member not found")

    if await count(db, MareaCrew.id, MareaCrew.marea_id == marea.id, MareaCrew.user_id == user.id):
        raise HTTPException(status_code=400, detail="Crew member is already on this marea")

    db.add(MareaCrew(marea_id=marea.id, user_id=user.id, notes=crew_in.notes))
    audit.log_action(db, ctx, marea, "update", f"added '{user.name}' to Marea '{marea.marea_number}'")
    await db.commit()
    return await detail_response(db, marea)


@router.delete("/{marea_id}/crew/{user_id}", response_model=MareaDetailResponse)
async def remove_crew(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.edit")),
    marea_id: int,
    user_id: int,
) -> Any:
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    ensure_unlocked(marea)
    link = (await db.execute(
        select(MareaCrew).where(MareaCrew.marea_id == marea.id, MareaCrew.user_id == user_id)
    )).scalars().first()
    if not link:
        raise HTTPException(status_code=404, detail="Crew member is not on this marea")

    await db.delete(link)
    audit.log_action(db, ctx, marea, "update", f"removed crew member #{user_id} from Marea '{marea.marea_number}'")
    await db.commit()
    return await detail_response(db, marea)


@router.post("/{marea_id}/quantity-returns", response_model=MareaDetailResponse)
async def add_quantity_return(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.edit")),
    marea_id: int,
    return_in: QuantityReturnIn,
) -> Any:
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    ensure_unlocked(marea)
    db.add(MareaQuantityReturn(marea_id=marea.id, **return_in.model_dump()))
    await db.commit()
    return await detail_response(db, marea)


@router.delete("/{marea_id}/quantity-returns/{return_id}", response_model=MareaDetailResponse)
async def remove_quantity_return(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.edit")),
    marea_id: int,
    return_id: int,
) -> Any:
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    ensure_unlocked(marea)
    row = await db.get(MareaQuantityReturn, return_id)
    if not row or row.marea_id != marea.id:
        raise HTTPException(status_code=404, detail="Quantity return not found")
    await db.delete(row)
    await db.commit()
    return await detail_response(db, marea)


@router.post("/{marea_id}/transactions", response_model=MareaDetailResponse)
async def attach_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.edit")),
    marea_id: int,
    attach_in: AttachTransaction,
) -> Any:
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    if marea.is_locked:
        raise HTTPException(status_code=400, detail="Cannot add transactions to a closed or cancelled marea")
    transaction = await get_or_404(db, Transaction, attach_in.transaction_id, ctx.vessel_id, "Transaction not found")
    if transaction.marea_id and transaction.marea_id != marea.id:
        raise HTTPException(status_code=400, detail="Transaction belongs to another marea")

    before = audit.snapshot(transaction)
    transaction.marea_id = marea.id
    audit.log_update(db, ctx, transaction, before)
    await db.commit()
    return await detail_response(db, marea)


@router.delete("/{marea_id}/transactions/{transaction_id}", response_model=MareaDetailResponse)
async def detach_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.edit")),
    marea_id: int,
    transaction_id: int,
) -> Any:
    """The transaction stays on the vessel, only the marea link is removed"""
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    if marea.is_locked:
        raise HTTPException(status_code=400, detail="Cannot remove transactions from a closed or cancelled marea")
    transaction = await get_or_404(db, Transaction, transaction_id, ctx.vessel_id, "Transaction not found")
    if transaction.marea_id != marea.id:
        raise HTTPException(status_code=404, detail="Transaction is not on this marea")

    before = audit.snapshot(transaction)
    transaction.marea_id = None
    audit.log_update(db, ctx, transaction, before)
    await db.commit()
    return await detail_response(db, marea)
