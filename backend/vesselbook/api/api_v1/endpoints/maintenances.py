"""Maintenance API"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, case, update, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from vesselbook.api.deps import get_or_404, paginate
from vesselbook.api.api_v1.endpoints.transactions import build_transaction_responses
from vesselbook.core.config import settings
from vesselbook.core.deps import get_db, require_permission, VesselContext
from vesselbook.models import Maintenance, Transaction
from vesselbook.models.maintenance import MaintenanceStateError
from vesselbook.models.transaction import TYPE_INCOME, TYPE_EXPENSE
from vesselbook.schemas.maintenance import (
    MaintenanceCreate, MaintenanceUpdate, MaintenanceFinalize, MaintenanceResponse,
    MaintenanceDetailResponse, MaintenanceListResponse,
)
from vesselbook.services import audit, numbering, vessel_settings

router = APIRouter()


async def maintenance_totals(db: AsyncSession, ids: List[int]) -> Dict[int, Tuple[int, int]]:
    if not ids:
        return {}
    result = await db.execute(
        select(
            Transaction.maintenance_id,
            func.coalesce(func.sum(case((Transaction.type == TYPE_INCOME, Transaction.total_amount), else_=0)), 0),
            func.coalesce(func.sum(case((Transaction.type == TYPE_EXPENSE, Transaction.total_amount), else_=0)), 0),
        )
        .where(Transaction.maintenance_id.in_(ids), Transaction.not_trashed())
        .group_by(Transaction.maintenance_id)
    )
    totals = {i: (0, 0) for i in ids}
    for maintenance_id, income, expenses in result.all():
        totals[maintenance_id] = (int(income), int(expenses))
    return totals


def build_maintenance_response(maintenance: Maintenance, totals: Tuple[int, int],
                               response_class=MaintenanceResponse):
    resp = response_class.model_validate(maintenance)
    resp.total_income, resp.total_expenses = totals
    resp.net_result = totals[0] - totals[1]
    return resp


async def attach_transactions(db: AsyncSession, maintenance: Maintenance, transaction_ids: List[int]) -> None:
    """Make transaction_ids the exact set of transactions of the maintenance"""
    rows = []
    if transaction_ids:
        rows = (await db.execute(
            select(Transaction).where(
                Transaction.id.in_(transaction_ids),
                Transaction.vessel_id == maintenance.vessel_id,
                Transaction.not_trashed(),
            )
        )).scalars().all()
        if len(rows) != len(set(transaction_ids)):
            raise HTTPException(status_code=404, detail="Transaction not found")

    await db.execute(
        update(Transaction)
        .where(Transaction.maintenance_id == maintenance.id, Transaction.id.not_in(transaction_ids or [0]))
        .values(maintenance_id=None)
    )
    for transaction in rows:
        transaction.maintenance_id = maintenance.id


async def detail_response(db: AsyncSession, maintenance: Maintenance) -> MaintenanceDetailResponse:
    totals = (await maintenance_totals(db, [maintenance.id]))[maintenance.id]
    resp = build_maintenance_response(maintenance, totals, MaintenanceDetailResponse)
    items = (await db.execute(
        select(Transaction)
        .where(Transaction.maintenance_id == maintenance.id, Transaction.not_trashed())
        .order_by(Transaction.transaction_date, Transaction.id)
    )).scalars().all()
    resp.transactions = await build_transaction_responses(db, list(items))
    return resp


def ensure_open(maintenance: Maintenance) -> None:
    if not maintenance.is_open:
        raise HTTPException(status_code=400, detail="Maintenance is not open")


@router.get("/", response_model=MaintenanceListResponse)
async def list_maintenances(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("maintenances.view")),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
) -> Any:
    conditions = [Maintenance.vessel_id == ctx.vessel_id, Maintenance.not_trashed()]
    if status:
        conditions.append(Maintenance.status == status)
    if search:
        conditions.append(or_(
            Maintenance.maintenance_number.contains(search),
            Maintenance.name.contains(search),
        ))
    items, total = await paginate(
        db, select(Maintenance).where(and_(*conditions)), page, limit,
        Maintenance.start_date.desc(), Maintenance.id.desc(),
    )
    totals = await maintenance_totals(db, [m.id for m in items])
    return MaintenanceListResponse(
        data=[build_maintenance_response(m, totals[m.id]) for m in items],
        total=total, page=page, limit=limit,
    )


@router.post("/", response_model=MaintenanceDetailResponse)
async def create_maintenance(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("maintenances.create")),
    maintenance_in: MaintenanceCreate,
) -> Any:
    data = maintenance_in.model_dump(exclude={"transaction_ids"})
    data["currency"] = (data.get("currency") or await vessel_settings.default_currency(db, ctx.vessel_id)).upper()
    if data.get("house_of_zeros") is None:
        data["house_of_zeros"] = settings.DEFAULT_HOUSE_OF_ZEROS

    maintenance = Maintenance(
        **data,
        vessel_id=ctx.vessel_id,
        maintenance_number=await numbering.next_maintenance_number(db, ctx.vessel_id),
        status="open",
        created_by=ctx.user.id,
    )
    db.add(maintenance)
    await db.flush()
    await attach_transactions(db, maintenance, maintenance_in.transaction_ids)

    audit.log_create(db, ctx, maintenance)
    await db.commit()
    await db.refresh(maintenance)
    return await detail_response(db, maintenance)


@router.get("/{maintenance_id}", response_model=MaintenanceDetailResponse)
async def get_maintenance(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("maintenances.view")),
    maintenance_id: int,
) -> Any:
    maintenance = await get_or_404(db, Maintenance, maintenance_id, ctx.vessel_id, "Maintenance not found")
    return await detail_response(db, maintenance)


@router.put("/{maintenance_id}", response_model=MaintenanceDetailResponse)
async def update_maintenance(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("maintenances.edit")),
    maintenance_id: int,
    maintenance_in: MaintenanceUpdate,
) -> Any:
    maintenance = await get_or_404(db, Maintenance, maintenance_id, ctx.vessel_id, "Maintenance not found")
    ensure_open(maintenance)

    update_data = maintenance_in.model_dump(exclude_unset=True)
    transaction_ids = update_data.pop("transaction_ids", None)

    before = audit.snapshot(maintenance)
    for field, value in update_data.items():
        setattr(maintenance, field, value)
    if transaction_ids is not None:
        await attach_transactions(db, maintenance, transaction_ids)
    audit.log_update(db, ctx, maintenance, before)

    await db.commit()
    await db.refresh(maintenance)
    return await detail_response(db, maintenance)


@router.post("/{maintenance_id}/finalize", response_model=MaintenanceDetailResponse)
async def finalize_maintenance(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("maintenances.edit")),
    maintenance_id: int,
    finalize_in: MaintenanceFinalize,
) -> Any:
    maintenance = await get_or_404(db, Maintenance, maintenance_id, ctx.vessel_id, "Maintenance not found")
    try:
        maintenance.finalize(finalize_in.end_date)
    except MaintenanceStateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit.log_action(db, ctx, maintenance, "update", f"finalized Maintenance '{maintenance.maintenance_number}'")
    await db.commit()
    await db.refresh(maintenance)
    return await detail_response(db, maintenance)


@router.post("/{maintenance_id}/cancel", response_model=MaintenanceDetailResponse)
async def cancel_maintenance(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("maintenances.edit")),
    maintenance_id: int,
) -> Any:
    maintenance = await get_or_404(db, Maintenance, maintenance_id, ctx.vessel_id, "Maintenance not found")
    try:
        maintenance.cancel()
    except MaintenanceStateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit.log_action(db, ctx, maintenance, "update", f"cancelled Maintenance '{maintenance.maintenance_number}'")
    await db.commit()
    await db.refresh(maintenance)
    return await detail_response(db, maintenance)


@router.delete("/{maintenance_id}/transactions/{transaction_id}")
async def remove_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("maintenances.edit")),
    maintenance_id: int,
    transaction_id: int,
) -> Any:
    maintenance = await get_or_404(db, Maintenance, maintenance_id, ctx.vessel_id, "Maintenance not found")
    ensure_open(maintenance)
    transaction = await get_or_404(db, Transaction, transaction_id, ctx.vessel_id, "Transaction not found")
    if transaction.maintenance_id != maintenance.id:
        raise HTTPException(status_code=400, detail="Transaction does not belong to this maintenance")

    transaction.maintenance_id = None
    await db.commit()
    return {"message": "Transaction removed from the maintenance"}


@router.delete("/{maintenance_id}")
async def delete_maintenance(
    *,
    db: AsyncSession = Depends(get_db),
    ctx: VesselContext = Depends(require_permission("maintenances.delete")),
    maintenance_id: int,
) -> Any:
    """Move the maintenance and its transactions to the recycle bin"""
    maintenance = await get_or_404(db, Maintenance, maintenance_id, ctx.vessel_id, "Maintenance not found")
    now = datetime.utcnow()
    maintenance.soft_delete(now)
    await db.execute(
        update(Transaction)
        .where(Transaction.maintenance_id == maintenance.id, Transaction.not_trashed())
        .values(deleted_at=now)
    )
    audit.log_delete(db, ctx, maintenance)
    await db.commit()
    return {"message": "Maintenance moved to the recycle bin"}
