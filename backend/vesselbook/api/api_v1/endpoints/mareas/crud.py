"""Marea create, read, update and delete"""

from datetime import datetime
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, update, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import get_or_404, paginate
from vesselbook.api.api_v1.endpoints.crew_members import build_member_response
from vesselbook.api.api_v1.endpoints.transactions import build_transaction_responses
from vesselbook.core.config import settings
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import Marea, MareaCrew, MareaDistributionProfile, Transaction, User
from vesselbook.schemas.crew import CrewMemberResponse
from vesselbook.schemas.marea import (
    MareaCreate, MareaUpdate, MareaDetailResponse, MareaListResponse, NextMareaNumber,
)
from vesselbook.schemas.transaction import TransactionResponse
from vesselbook.services import audit, numbering, vessel_settings
from .core import get_marea, ensure_unlocked, build_marea_responses, detail_response

router = APIRouter()


async def check_profile(db: AsyncSession, profile_id: Optional[int], vessel_id: int) -> None:
    if profile_id:
        await get_or_404(db, MareaDistributionProfile, profile_id, vessel_id, "Distribution profile not found")


@router.get("/", response_model=MareaListResponse)
async def list_mareas(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.view")),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
) -> Any:
    conditions = [Marea.vessel_id == ctx.vessel_id, Marea.not_trashed()]
    if status:
        conditions.append(Marea.status == status)
    if search:
        conditions.append(or_(Marea.marea_number.contains(search), Marea.name.contains(search)))

    items, total = await paginate(
        db, select(Marea).where(and_(*conditions)), page, limit, Marea.id.desc()
    )
    return MareaListResponse(
        data=await build_marea_responses(db, items), total=total, page=page, limit=limit
    )


@router.get("/next-number", response_model=NextMareaNumber)
async def next_number(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.create")),
) -> Any:
    """Number the next marea would get when created without one"""
    return NextMareaNumber(marea_number=await numbering.next_marea_number(db, ctx.vessel_id))


@router.post("/", response_model=MareaDetailResponse)
async def create_marea(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.create")),
    marea_in: MareaCreate,
) -> Any:
    await check_profile(db, marea_in.distribution_profile_id, ctx.vessel_id)

    number = marea_in.marea_number
    if number:
        if await numbering.marea_number_taken(db, ctx.vessel_id, number):
            raise HTTPException(status_code=400, detail="Marea number already in use")
    else:
        number = await numbering.next_marea_number(db, ctx.vessel_id)

    data = marea_in.model_dump(exclude={"marea_number"})
    data["currency"] = (data.get("currency") or await vessel_settings.default_currency(db, ctx.vessel_id)).upper()
    if data.get("house_of_zeros") is None:
        data["house_of_zeros"] = settings.DEFAULT_HOUSE_OF_ZEROS

    marea = Marea(
        **data,
        marea_number=number,
        vessel_id=ctx.vessel_id,
        status="preparing",
        created_by=ctx.user.id,
    )
    db.add(marea)
    await db.flush()
    audit.log_create(db, ctx, marea)
    await db.commit()
    await db.refresh(marea)
    return await detail_response(db, marea)


@router.get("/{marea_id}", response_model=MareaDetailResponse)
async def get_marea_detail(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.view")),
    marea_id: int,
) -> Any:
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    return await detail_response(db, marea)


@router.put("/{marea_id}", response_model=MareaDetailResponse)
async def update_marea(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.edit")),
    marea_id: int,
    marea_in: MareaUpdate,
) -> Any:
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    ensure_unlocked(marea)
    update_data = marea_in.model_dump(exclude_unset=True)

    departure = update_data.get("estimated_departure_date", marea.estimated_departure_date)
    return_date = update_data.get("estimated_return_date", marea.estimated_return_date)
    if departure and return_date and return_date < departure:
        raise HTTPException(
            status_code=400, detail="estimated_return_date must be on or after estimated_departure_date"
        )

    if "distribution_profile_id" in update_data:
        await check_profile(db, update_data["distribution_profile_id"], ctx.vessel_id)
    number = update_data.get("marea_number")
    if number and number != marea.marea_number:
        if await numbering.marea_number_taken(db, ctx.vessel_id, number, exclude_id=marea.id):
            raise HTTPException(status_code=400, detail="Marea number already in use")

    before = audit.snapshot(marea)
    for field, value in update_data.items():
        setattr(marea, field, value)
    audit.log_update(db, ctx, marea, before)
    await db.commit()
    await db.refresh(marea)
    return await detail_response(db, marea)


@router.delete("/{marea_id}")
async def delete_marea(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.delete")),
    marea_id: int,
) -> Any:
    """Move the marea and its transactions to the recycle bin"""
    marea = await get_marea(db, marea_id, ctx.vessel_id)
    now = datetime.utcnow()
    marea.soft_delete(now)
    await db.execute(
        update(Transaction)
        .where(Transaction.marea_id == marea.id, Transaction.not_trashed())
        .values(deleted_at=now)
    )
    audit.log_delete(db, ctx, marea)
    await db.commit()
    return {"message": "Marea moved to the recycle bin"}


@router.get("/{marea_id}/available-transactions", response_model=List[TransactionResponse])
async def available_transactions(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.view")),
    marea_id: int,
) -> Any:
    """Vessel transactions not attached to any marea"""
    await get_marea(db, marea_id, ctx.vessel_id)
    items = (await db.execute(
        select(Transaction)
        .where(
            Transaction.vessel_id == ctx.vessel_id,
            Transaction.marea_id.is_(None),
            Transaction.not_trashed(),
        )
        .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
    )).scalars().all()
    return await build_transaction_responses(db, list(items))


@router.get("/{marea_id}/available-crew", response_model=List[CrewMemberResponse])
async def available_crew(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("mareas.view")),
    marea_id: int,
) -> Any:
    """Crew of the vessel not yet on this marea"""
    await get_marea(db, marea_id, ctx.vessel_id)
    on_board = select(MareaCrew.user_id).where(MareaCrew.marea_id == marea_id)
    users = (await db.execute(
        select(User)
        .where(
            User.vessel_id == ctx.vessel_id,
            User.not_trashed(),
            User.status == "active",
            User.id.not_in(on_board),
        )
        .order_by(User.name)
    )).scalars().all()
    return [await build_member_response(db, u) for u in users]
